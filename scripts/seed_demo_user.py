"""Seed a verified demo account."""

from app import create_app
from models import db
from models.user import User

DEMO_EMAIL = "demo@example.com"
DEMO_PASSWORD = "DemoPass123"


def main() -> None:
    app = create_app()
    with app.app_context():
        user = User.query.filter_by(email=DEMO_EMAIL).first()
        if user is None:
            user = User.register(DEMO_EMAIL, DEMO_PASSWORD)
            db.session.add(user)
            action = "created"
        else:
            user.set_password(DEMO_PASSWORD)
            action = "updated"
        user.mark_verified()
        db.session.commit()
        print(f"Demo user {action}: {DEMO_EMAIL}")


if __name__ == "__main__":
    main()
