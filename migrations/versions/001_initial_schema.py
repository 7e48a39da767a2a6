"""Initial schema: doctors, doctor_slots, doctor_ratings, appointments.

Revision ID: 001_initial
Revises:
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "doctors",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("qualification", sa.String(length=200), nullable=True),
        sa.Column("specialty", sa.String(length=120), nullable=False),
        sa.Column("experience_years", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("hospital_name", sa.String(length=200), nullable=True),
        sa.Column("hospital_location", sa.String(length=200), nullable=True),
        sa.Column("consultation_fee", sa.Float(), nullable=False, server_default="0"),
        sa.Column("registration_verified", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("profile_image", sa.String(), nullable=True),
        sa.Column("available", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("hashed_password", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_doctors_name"), "doctors", ["name"], unique=False)
    op.create_index(op.f("ix_doctors_specialty"), "doctors", ["specialty"], unique=False)
    op.create_index(op.f("ix_doctors_email"), "doctors", ["email"], unique=True)

    op.create_table(
        "doctor_slots",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("doctor_id", sa.Integer(), nullable=False),
        sa.Column("slot_at", sa.DateTime(), nullable=False),
        sa.Column("booked", sa.Boolean(), nullable=False, server_default="false"),
        sa.ForeignKeyConstraint(["doctor_id"], ["doctors.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("doctor_id", "slot_at", name="uq_doctor_slots_doctor_id_slot_at"),
    )
    op.create_index(op.f("ix_doctor_slots_doctor_id"), "doctor_slots", ["doctor_id"], unique=False)
    op.create_index(op.f("ix_doctor_slots_slot_at"), "doctor_slots", ["slot_at"], unique=False)

    op.create_table(
        "doctor_ratings",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("doctor_id", sa.Integer(), nullable=False),
        sa.Column("patient_id", sa.String(length=64), nullable=False),
        sa.Column("score", sa.Integer(), nullable=False),
        sa.Column("comment", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["doctor_id"], ["doctors.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_doctor_ratings_doctor_id"), "doctor_ratings", ["doctor_id"], unique=False)
    op.create_index(op.f("ix_doctor_ratings_patient_id"), "doctor_ratings", ["patient_id"], unique=False)

    op.create_table(
        "appointments",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("doctor_id", sa.Integer(), nullable=False),
        sa.Column("patient_id", sa.String(length=64), nullable=False),
        sa.Column("hospital_name", sa.String(), nullable=True),
        sa.Column("hospital_location", sa.String(), nullable=True),
        sa.Column("fee", sa.Float(), nullable=False),
        sa.Column("slot_at", sa.DateTime(), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="confirmed"),
        sa.Column("paid", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["doctor_id"], ["doctors.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_appointments_doctor_id"), "appointments", ["doctor_id"], unique=False)
    op.create_index(op.f("ix_appointments_patient_id"), "appointments", ["patient_id"], unique=False)
    op.create_index(op.f("ix_appointments_slot_at"), "appointments", ["slot_at"], unique=False)
    op.create_index(op.f("ix_appointments_status"), "appointments", ["status"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_appointments_status"), table_name="appointments")
    op.drop_index(op.f("ix_appointments_slot_at"), table_name="appointments")
    op.drop_index(op.f("ix_appointments_patient_id"), table_name="appointments")
    op.drop_index(op.f("ix_appointments_doctor_id"), table_name="appointments")
    op.drop_table("appointments")
    op.drop_index(op.f("ix_doctor_ratings_patient_id"), table_name="doctor_ratings")
    op.drop_index(op.f("ix_doctor_ratings_doctor_id"), table_name="doctor_ratings")
    op.drop_table("doctor_ratings")
    op.drop_index(op.f("ix_doctor_slots_slot_at"), table_name="doctor_slots")
    op.drop_index(op.f("ix_doctor_slots_doctor_id"), table_name="doctor_slots")
    op.drop_table("doctor_slots")
    op.drop_index(op.f("ix_doctors_email"), table_name="doctors")
    op.drop_index(op.f("ix_doctors_specialty"), table_name="doctors")
    op.drop_index(op.f("ix_doctors_name"), table_name="doctors")
    op.drop_table("doctors")
