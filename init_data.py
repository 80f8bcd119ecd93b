import os

from marketplace import create_app
from marketplace.extensions import db
from marketplace.models import Category, CategoryStatus, User, UserRole
from marketplace.services.catalog_service import add_category
from marketplace.utils import slugify

app = create_app()

# name -> child names
CATEGORY_TREE = {
    "Electronics": ["Phones", "Laptops", "Audio"],
    "Fashion": ["Men", "Women", "Shoes"],
    "Home": ["Furniture", "Kitchen"],
    "Books": [],
    "Sports": [],
    "Beauty": [],
}


def ensure_category(name, ancestors):
    slug = slugify(name)
    existing = Category.query.filter_by(slug=slug).first()
    if existing:
        return existing
    category = add_category(Category(
        name=name,
        slug=slug,
        parent_category_id=list(ancestors) or None,
        child_categories=[],
        status=CategoryStatus.ACTIVE,
    ))
    print(f"Created category: {name}")
    return category


with app.app_context():
    for parent_name, child_names in CATEGORY_TREE.items():
        parent = ensure_category(parent_name, [])
        for child_name in child_names:
            ensure_category(child_name, [parent.id])

    # Users rows are provisioned on first authenticated request; promote one
    # of them to admin by email.
    admin_email = os.environ.get("ADMIN_EMAIL")
    if admin_email:
        admin = User.query.filter_by(email=admin_email).first()
        if admin is None:
            print(f"No user with email {admin_email}; sign in once first")
        elif admin.role != UserRole.ADMIN:
            admin.role = UserRole.ADMIN
            print(f"Promoted {admin_email} to admin")

    db.session.commit()
    print("Data initialization completed!")
