"""Initial schema: categories, posts, post_categories

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-09-01 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'categories',
        sa.Column('id', sa.Text, primary_key=True),
        sa.Column('name', sa.Text, nullable=False, comment='Display name, offered to the AI classifier'),
        sa.Column('slug', sa.Text, nullable=False),
        sa.Column('color', sa.Text, nullable=False, server_default='#3B82F6'),
        sa.Column('post_count', sa.Integer, nullable=False, server_default='0',
                  comment='Posts with this category as primary or secondary'),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text('NOW()')),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text('NOW()')),
    )
    op.create_unique_constraint('uq_categories_slug', 'categories', ['slug'])
    op.create_index('idx_categories_name_lower', 'categories', [sa.text('LOWER(name)')])

    op.create_table(
        'posts',
        sa.Column('id', sa.Text, primary_key=True),
        sa.Column('content', sa.Text, nullable=False),
        sa.Column('primary_category_id', sa.Text, sa.ForeignKey('categories.id'), nullable=True),

        # AI categorization output
        sa.Column('original_language', sa.Text, nullable=False, server_default='English'),
        sa.Column('translated_content', sa.Text),
        sa.Column('tags', sa.Text, nullable=False, server_default='[]', comment='JSON array of tags'),
        sa.Column('ai_confidence', sa.Float, nullable=False, server_default='0'),

        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text('NOW()')),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text('NOW()')),
    )
    op.create_index('idx_posts_primary_category', 'posts', ['primary_category_id'])

    op.create_table(
        'post_categories',
        sa.Column('post_id', sa.Text, sa.ForeignKey('posts.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('category_id', sa.Text, sa.ForeignKey('categories.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('position', sa.SmallInteger, nullable=False, comment='0 = primary category'),
        sa.CheckConstraint('position >= 0 AND position < 4', name='ck_post_categories_max_four'),
    )
    op.create_index('idx_post_categories_category', 'post_categories', ['category_id'])


def downgrade() -> None:
    op.drop_table('post_categories')
    op.drop_table('posts')
    op.drop_table('categories')
