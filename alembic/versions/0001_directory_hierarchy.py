"""Directory hierarchy and synced records.

Creates zones -> dilas -> muqams, plus jamaats and members synced from
Tajneed. jamaats.muqam_id is the local mapping (NULL = unmapped).

Revision ID: 0001_directory_hierarchy
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic
revision = "0001_directory_hierarchy"
down_revision = None
branch_labels = None
depends_on = None


def _contact_columns() -> list[sa.Column]:
    return [
        sa.Column("code", sa.String(50), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("contact_person", sa.String(255), nullable=True),
        sa.Column("phone_number", sa.String(50), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "zones",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        *_contact_columns(),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_zones"),
    )

    op.create_table(
        "dilas",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        *_contact_columns(),
        sa.Column(
            "zone_id",
            sa.Uuid(),
            sa.ForeignKey("zones.id", name="fk_dilas_zone_id_zones", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_dilas"),
    )
    op.create_index("idx_dilas_zone", "dilas", ["zone_id"])

    op.create_table(
        "muqams",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        *_contact_columns(),
        sa.Column(
            "dila_id",
            sa.Uuid(),
            sa.ForeignKey("dilas.id", name="fk_muqams_dila_id_dilas", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_muqams"),
    )
    op.create_index("idx_muqams_dila", "muqams", ["dila_id"])

    op.create_table(
        "jamaats",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("jamaat_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("code", sa.String(50), nullable=True),
        sa.Column("circuit_name", sa.String(255), nullable=True),
        sa.Column(
            "muqam_id",
            sa.Uuid(),
            sa.ForeignKey("muqams.id", name="fk_jamaats_muqam_id_muqams", ondelete="SET NULL"),
            nullable=True,
            comment="NULL = unmapped",
        ),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_jamaats"),
        sa.UniqueConstraint("jamaat_id", name="uq_jamaats_jamaat_id"),
    )
    op.create_index("idx_jamaats_muqam", "jamaats", ["muqam_id"])

    op.create_table(
        "members",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("chanda_no", sa.String(50), nullable=False),
        sa.Column("wasiyat_no", sa.String(50), nullable=True),
        sa.Column("title", sa.String(50), nullable=True),
        sa.Column("surname", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(255), nullable=True),
        sa.Column("middle_name", sa.String(255), nullable=True),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone_no", sa.String(50), nullable=True),
        sa.Column("marital_status", sa.String(50), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("next_of_kin_name", sa.String(255), nullable=True),
        sa.Column("next_of_kin_phone_no", sa.String(50), nullable=True),
        sa.Column("photo_url", sa.String(500), nullable=True),
        sa.Column("signature", sa.Text(), nullable=True),
        sa.Column("blood_group", sa.String(5), nullable=True),
        sa.Column("genotype", sa.String(5), nullable=True),
        sa.Column(
            "jamaat_id",
            sa.Integer(),
            nullable=True,
            comment="External jamaat id from Tajneed",
        ),
        sa.Column(
            "muqam_id",
            sa.Uuid(),
            sa.ForeignKey("muqams.id", name="fk_members_muqam_id_muqams", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_members"),
        sa.UniqueConstraint("chanda_no", name="uq_members_chanda_no"),
    )
    op.create_index("idx_members_jamaat", "members", ["jamaat_id"])
    op.create_index("idx_members_muqam", "members", ["muqam_id"])


def downgrade() -> None:
    op.drop_index("idx_members_muqam", table_name="members")
    op.drop_index("idx_members_jamaat", table_name="members")
    op.drop_table("members")
    op.drop_index("idx_jamaats_muqam", table_name="jamaats")
    op.drop_table("jamaats")
    op.drop_index("idx_muqams_dila", table_name="muqams")
    op.drop_table("muqams")
    op.drop_index("idx_dilas_zone", table_name="dilas")
    op.drop_table("dilas")
    op.drop_table("zones")
