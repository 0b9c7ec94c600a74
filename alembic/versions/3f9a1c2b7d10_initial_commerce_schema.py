"""initial_commerce_schema

Revision ID: 3f9a1c2b7d10
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9a1c2b7d10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


product_status_enum = sa.Enum(
    'draft', 'active', 'inactive', 'pending', name='product_status_enum'
)
product_media_type_enum = sa.Enum('image', 'video', name='product_media_type_enum')
order_status_enum = sa.Enum(
    'pending', 'paid', 'confirmed', 'shipped', 'delivered', 'cancelled',
    name='order_status_enum',
)
credit_transaction_type_enum = sa.Enum(
    'purchase', 'promotion_spend', 'refund', 'admin_adjustment',
    name='credit_transaction_type_enum',
)


def upgrade() -> None:
    """Upgrade schema - Create store and credits tables."""

    # Stores and products
    op.create_table(
        'stores',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('seller_id', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('slug', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id', name='pk_stores'),
        sa.UniqueConstraint('slug', name='uq_stores_slug'),
    )
    op.create_index('ix_stores_seller_id', 'stores', ['seller_id'], unique=True)

    op.create_table(
        'products',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('store_id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('price', sa.Numeric(12, 2), nullable=False),
        sa.Column('status', product_status_enum, server_default='draft', nullable=True),
        sa.Column('is_promoted', sa.Boolean(), server_default='false', nullable=True),
        sa.Column('promoted_start_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('promoted_end_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_trending', sa.Boolean(), server_default='false', nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ['store_id'], ['stores.id'],
            name='fk_products_store_id_stores', ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_products'),
    )
    op.create_index('ix_products_store_id', 'products', ['store_id'])
    op.create_index(
        'ix_products_promoted_end', 'products', ['is_promoted', 'promoted_end_date']
    )

    op.create_table(
        'product_media',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('product_id', sa.Uuid(), nullable=False),
        sa.Column('media_url', sa.String(length=1024), nullable=False),
        sa.Column('media_type', product_media_type_enum, server_default='image', nullable=True),
        sa.Column('mime_type', sa.String(length=100), nullable=True),
        sa.Column('order_index', sa.Integer(), nullable=False),
        sa.Column('is_cover', sa.Boolean(), server_default='false', nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ['product_id'], ['products.id'],
            name='fk_product_media_product_id_products', ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_product_media'),
        sa.UniqueConstraint(
            'product_id', 'order_index', name='uq_product_media_product_id_order_index'
        ),
    )

    # Collections
    op.create_table(
        'collections',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('store_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('order_index', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ['store_id'], ['stores.id'],
            name='fk_collections_store_id_stores', ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_collections'),
        sa.UniqueConstraint(
            'store_id', 'order_index', name='uq_collections_store_id_order_index'
        ),
    )

    op.create_table(
        'collection_products',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('collection_id', sa.Uuid(), nullable=False),
        sa.Column('product_id', sa.Uuid(), nullable=False),
        sa.Column('order_index', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ['collection_id'], ['collections.id'],
            name='fk_collection_products_collection_id_collections',
            ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['product_id'], ['products.id'],
            name='fk_collection_products_product_id_products', ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_collection_products'),
        sa.UniqueConstraint(
            'collection_id', 'product_id',
            name='uq_collection_products_collection_id_product_id',
        ),
        sa.UniqueConstraint(
            'collection_id', 'order_index',
            name='uq_collection_products_collection_id_order_index',
        ),
    )

    op.create_table(
        'global_collections',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('slug', sa.String(length=100), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('cover_image_url', sa.String(length=1024), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id', name='pk_global_collections'),
        sa.UniqueConstraint('slug', name='uq_global_collections_slug'),
    )

    op.create_table(
        'global_collection_products',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('global_collection_id', sa.Uuid(), nullable=False),
        sa.Column('product_id', sa.Uuid(), nullable=False),
        sa.Column('order_index', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ['global_collection_id'], ['global_collections.id'],
            name='fk_global_collection_products_global_collection_id_global_collections',
            ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['product_id'], ['products.id'],
            name='fk_global_collection_products_product_id_products',
            ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_global_collection_products'),
        sa.UniqueConstraint(
            'global_collection_id', 'product_id',
            name='uq_global_collection_products_global_collection_id_product_id',
        ),
        sa.UniqueConstraint(
            'global_collection_id', 'order_index',
            name='uq_global_collection_products_global_collection_id_order_index',
        ),
    )

    op.create_table(
        'ordered_list_counters',
        sa.Column('list_name', sa.String(length=64), nullable=False),
        sa.Column('parent_id', sa.Uuid(), nullable=False),
        sa.Column('last_index', sa.Integer(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('list_name', 'parent_id', name='pk_ordered_list_counters'),
    )

    op.create_table(
        'promotion_pricing',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('price_per_day', sa.Numeric(12, 2), nullable=False),
        sa.Column('min_days', sa.Integer(), nullable=False),
        sa.Column('max_days', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id', name='pk_promotion_pricing'),
    )

    # Orders
    op.create_table(
        'orders',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('order_number', sa.String(length=20), nullable=False),
        sa.Column('buyer_id', sa.String(length=255), nullable=False),
        sa.Column('status', order_status_enum, server_default='pending', nullable=True),
        sa.Column('subtotal', sa.Numeric(12, 2), nullable=False),
        sa.Column('shipping_cost', sa.Numeric(12, 2), server_default='0', nullable=True),
        sa.Column('total', sa.Numeric(12, 2), nullable=False),
        sa.Column('paid_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('confirmed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('shipped_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('delivered_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('cancelled_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id', name='pk_orders'),
    )
    op.create_index('ix_orders_order_number', 'orders', ['order_number'], unique=True)
    op.create_index('ix_orders_buyer_id', 'orders', ['buyer_id'])

    op.create_table(
        'order_items',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('order_id', sa.Uuid(), nullable=False),
        sa.Column('product_id', sa.Uuid(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('price_at_purchase', sa.Numeric(12, 2), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint('quantity > 0', name='ck_order_items_positive_quantity'),
        sa.ForeignKeyConstraint(
            ['order_id'], ['orders.id'],
            name='fk_order_items_order_id_orders', ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['product_id'], ['products.id'], name='fk_order_items_product_id_products'
        ),
        sa.PrimaryKeyConstraint('id', name='pk_order_items'),
    )
    op.create_index('ix_order_items_order_id', 'order_items', ['order_id'])
    op.create_index('ix_order_items_product_id', 'order_items', ['product_id'])

    # Credits ledger
    op.create_table(
        'credit_balances',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('balance', sa.Numeric(12, 2), server_default='0', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            'balance >= 0', name='ck_credit_balances_balance_non_negative'
        ),
        sa.PrimaryKeyConstraint('id', name='pk_credit_balances'),
    )
    op.create_index(
        'ix_credit_balances_user_id', 'credit_balances', ['user_id'], unique=True
    )

    op.create_table(
        'credit_packages',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('credits_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('bonus_credits', sa.Numeric(12, 2), server_default='0', nullable=False),
        sa.Column('price', sa.Numeric(12, 2), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False),
        sa.Column('order_index', sa.Integer(), server_default='0', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id', name='pk_credit_packages'),
    )

    op.create_table(
        'credit_transactions',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('balance_after', sa.Numeric(12, 2), nullable=False),
        sa.Column('transaction_type', credit_transaction_type_enum, nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('package_id', sa.Uuid(), nullable=True),
        sa.Column('product_id', sa.Uuid(), nullable=True),
        sa.Column('promotion_duration_days', sa.Integer(), nullable=True),
        sa.Column('idempotency_key', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('amount <> 0', name='ck_credit_transactions_amount_non_zero'),
        sa.PrimaryKeyConstraint('id', name='pk_credit_transactions'),
        sa.UniqueConstraint(
            'user_id', 'idempotency_key',
            name='uq_credit_transactions_user_id_idempotency_key',
        ),
    )
    op.create_index(
        'ix_credit_transactions_user_created',
        'credit_transactions',
        ['user_id', 'created_at'],
    )


def downgrade() -> None:
    """Downgrade schema - Drop store and credits tables."""
    op.drop_index('ix_credit_transactions_user_created', table_name='credit_transactions')
    op.drop_table('credit_transactions')
    op.drop_table('credit_packages')
    op.drop_index('ix_credit_balances_user_id', table_name='credit_balances')
    op.drop_table('credit_balances')

    op.drop_index('ix_order_items_product_id', table_name='order_items')
    op.drop_index('ix_order_items_order_id', table_name='order_items')
    op.drop_table('order_items')
    op.drop_index('ix_orders_buyer_id', table_name='orders')
    op.drop_index('ix_orders_order_number', table_name='orders')
    op.drop_table('orders')

    op.drop_table('promotion_pricing')
    op.drop_table('ordered_list_counters')
    op.drop_table('global_collection_products')
    op.drop_table('global_collections')
    op.drop_table('collection_products')
    op.drop_table('collections')
    op.drop_table('product_media')
    op.drop_index('ix_products_promoted_end', table_name='products')
    op.drop_index('ix_products_store_id', table_name='products')
    op.drop_table('products')
    op.drop_index('ix_stores_seller_id', table_name='stores')
    op.drop_table('stores')

    bind = op.get_bind()
    for enum in (
        credit_transaction_type_enum,
        order_status_enum,
        product_media_type_enum,
        product_status_enum,
    ):
        enum.drop(bind, checkfirst=True)
