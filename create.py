# create.py: bootstrap the first Admin account
from getpass import getpass
from mentorportal import create_app
from mentorportal.extensions import db
from mentorportal.models.user import User, Role


def main():
    app = create_app()
    with app.app_context():
        db.create_all()
        email = input("Admin email: ").strip().lower()
        first_name = input("First name: ").strip()
        last_name = input("Last name: ").strip()
        password = getpass("Password: ")

        # Check existing
        if User.query.filter_by(email=email).first():
            print("User with that email already exists.")
            return

        user = User(first_name=first_name, last_name=last_name, email=email, role=Role.ADMIN.value)
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        print(f"Admin user {email} created successfully.")

if __name__ == "__main__":
    main()
