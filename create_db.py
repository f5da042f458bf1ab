from app import create_app
from models import db
from models.user import User
from models.category import Category

ADMIN_EMAIL = 'admin@example.com'
ADMIN_PASSWORD = 'admin12345'

def create_database(app=None):
    app = app or create_app()
    with app.app_context():
        # drop every existing table
        db.drop_all()
        print("Dropped the old database")

        db.create_all()
        print("Created the new database")

        # default admin account
        admin_user = User(
            name='Administrator',
            email=ADMIN_EMAIL,
            role='admin',
            is_email_verified=True
        )
        admin_user.set_password(ADMIN_PASSWORD)
        db.session.add(admin_user)

        # default categories
        categories = [
            Category(name='Electronics'),
            Category(name='Clothing'),
            Category(name='Furniture'),
            Category(name='Books')
        ]

        for category in categories:
            db.session.add(category)

        db.session.commit()
        print("Added the default data")
        print("Login credentials:")
        print(f"Email: {ADMIN_EMAIL}")
        print(f"Password: {ADMIN_PASSWORD}")

if __name__ == '__main__':
    create_database()
