# -*- coding: utf-8 -*-
"""Create config_scripts table

Revision ID: 4d1f0a6c2b7e
Revises:
Create Date: 2014-02-09 13:29:11.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = u"4d1f0a6c2b7e"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        u"config_scripts",
        sa.Column(u"id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(u"script_name", sa.UnicodeText),
    )
    op.create_index(
        u"ix_config_scripts_script_name", u"config_scripts", [u"script_name"]
    )


def downgrade():
    op.drop_index(u"ix_config_scripts_script_name", u"config_scripts")
    op.drop_table(u"config_scripts")
