from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "a1f3c9e7d2b4"
down_revision = None
branch_labels = None
depends_on = None


USER_ROLE = sa.Enum("user", "vendor", "admin", name="user_role")
USER_STATUS = sa.Enum("active", "suspended", "deleted", name="user_status")
BUSINESS_STATUS = sa.Enum(
    "pending_verification",
    "active",
    "rejected",
    "suspended",
    name="business_status",
)
PRODUCT_STATUS = sa.Enum(
    "active", "pending", "inactive", "delete", name="product_status"
)
CATEGORY_STATUS = sa.Enum("active", "deleted", name="category_status")


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("first_name", sa.String(length=100), nullable=True),
        sa.Column("last_name", sa.String(length=100), nullable=True),
        sa.Column("phone_number", sa.String(length=30), nullable=True),
        sa.Column("whatsapp_number", sa.String(length=30), nullable=True),
        sa.Column("profile_picture", sa.String(length=500), nullable=True),
        sa.Column("shop_link", sa.String(length=500), nullable=True),
        sa.Column("profile_link", sa.String(length=500), nullable=True),
        sa.Column("role", USER_ROLE, nullable=False),
        sa.Column("status", USER_STATUS, nullable=False),
        sa.Column("status_update_reason", sa.Text(), nullable=True),
        sa.Column("business_profile_id", sa.String(length=36), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_users_email", "users", ["email"])
    op.create_index("ix_users_created_at", "users", ["created_at"])

    op.create_table(
        "business_profile",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "owner_id",
            sa.String(length=36),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("business_name", sa.String(length=200), nullable=False),
        sa.Column("slug", sa.String(length=220), nullable=False),
        sa.Column("address", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("cover_image", sa.String(length=500), nullable=True),
        sa.Column("profile_image", sa.String(length=500), nullable=True),
        sa.Column("business_email", sa.String(length=255), nullable=True),
        sa.Column("business_phone", sa.String(length=30), nullable=True),
        sa.Column(
            "business_whatsapp_number", sa.String(length=30), nullable=True
        ),
        sa.Column("status", BUSINESS_STATUS, nullable=False),
        sa.Column("status_update_reason", sa.Text(), nullable=True),
        sa.Column("total_products", sa.Integer(), nullable=False),
        sa.Column("rating", sa.Numeric(3, 2), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index(
        "ix_business_profile_owner_id",
        "business_profile",
        ["owner_id"],
        unique=True,
    )
    op.create_index(
        "ix_business_profile_slug", "business_profile", ["slug"], unique=True
    )
    op.create_index(
        "ix_business_profile_status", "business_profile", ["status"]
    )
    op.create_index(
        "ix_business_profile_created_at", "business_profile", ["created_at"]
    )

    op.create_table(
        "category",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("slug", sa.String(length=120), nullable=False),
        sa.Column("parent_category_id", sa.JSON(), nullable=True),
        sa.Column("child_categories", sa.JSON(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("icon", sa.String(length=500), nullable=True),
        sa.Column("image", sa.String(length=500), nullable=True),
        sa.Column("status", CATEGORY_STATUS, nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_category_slug", "category", ["slug"], unique=True)
    op.create_index("ix_category_status", "category", ["status"])
    op.create_index("ix_category_created_at", "category", ["created_at"])

    op.create_table(
        "products",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "product_owner_id",
            sa.String(length=36),
            sa.ForeignKey("business_profile.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("images", sa.JSON(), nullable=False),
        sa.Column(
            "category_id",
            sa.String(length=36),
            sa.ForeignKey("category.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("condition", sa.String(length=50), nullable=True),
        sa.Column("vendor_location", sa.String(length=255), nullable=True),
        sa.Column("status", PRODUCT_STATUS, nullable=False),
        sa.Column("views_count", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index(
        "ix_products_product_owner_id", "products", ["product_owner_id"]
    )
    op.create_index("ix_products_name", "products", ["name"])
    op.create_index("ix_products_category_id", "products", ["category_id"])
    op.create_index("ix_products_status", "products", ["status"])
    op.create_index("ix_products_created_at", "products", ["created_at"])

    op.create_table(
        "product_contact_views",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "product_id",
            sa.String(length=36),
            sa.ForeignKey("products.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "user_id",
            sa.String(length=36),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "vendor_id",
            sa.String(length=36),
            sa.ForeignKey("business_profile.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index(
        "ix_product_contact_views_product_id",
        "product_contact_views",
        ["product_id"],
    )

    op.create_table(
        "admin_log",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "admin_id",
            sa.String(length=36),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("action", sa.String(length=100), nullable=False),
        sa.Column("target_id", sa.String(length=64), nullable=True),
        sa.Column("target_type", sa.String(length=50), nullable=True),
        sa.Column("details", sa.JSON(), nullable=True),
        sa.Column("ip_address", sa.String(length=45), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_admin_log_admin_id", "admin_log", ["admin_id"])
    op.create_index("ix_admin_log_action", "admin_log", ["action"])
    op.create_index("ix_admin_log_created_at", "admin_log", ["created_at"])


def downgrade():
    op.drop_table("admin_log")
    op.drop_table("product_contact_views")
    op.drop_table("products")
    op.drop_table("category")
    op.drop_table("business_profile")
    op.drop_table("users")

    bind = op.get_bind()
    for enum_type in (
        CATEGORY_STATUS,
        PRODUCT_STATUS,
        BUSINESS_STATUS,
        USER_STATUS,
        USER_ROLE,
    ):
        enum_type.drop(bind, checkfirst=True)
