"""seed predefined forum categories

Revision ID: 002_seed_categories
Revises: 001_initial_schema
Create Date: 2026-09-01 10:30:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '002_seed_categories'
down_revision = '001_initial_schema'
branch_labels = None
depends_on = None

PREDEFINED_CATEGORIES = [
    {"id": "business", "name": "Business", "slug": "business", "color": "#059669"},
    {"id": "design", "name": "Design", "slug": "design", "color": "#7C3AED"},
    {"id": "informative", "name": "Informative", "slug": "informative", "color": "#0D9488"},
    {"id": "career", "name": "Career", "slug": "career", "color": "#0EA5E9"},
    {"id": "jobs", "name": "Jobs", "slug": "jobs", "color": "#DC2626"},
    {"id": "construction", "name": "Construction", "slug": "construction", "color": "#EA580C"},
    {"id": "academic", "name": "Academic", "slug": "academic", "color": "#7C2D12"},
    {"id": "other", "name": "Other", "slug": "other", "color": "#6B7280"},
]


def upgrade() -> None:
    categories = sa.table(
        'categories',
        sa.column('id', sa.Text),
        sa.column('name', sa.Text),
        sa.column('slug', sa.Text),
        sa.column('color', sa.Text),
    )
    op.bulk_insert(categories, PREDEFINED_CATEGORIES)


def downgrade() -> None:
    ids = ", ".join(f"'{c['id']}'" for c in PREDEFINED_CATEGORIES)
    op.execute(f"DELETE FROM categories WHERE id IN ({ids})")
