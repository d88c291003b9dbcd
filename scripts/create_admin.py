"""
Create an admin account, or promote an existing user to admin

Usage:
    python scripts/create_admin.py <email> <username> <password>
"""
import sys
from pathlib import Path

# Add parent directory to path to import app modules
current_dir = Path(__file__).resolve().parent
sys.path.append(str(current_dir.parent))

from app.core.database import get_session_local, init_db  # noqa: E402
from app.core.security import get_password_hash  # noqa: E402
from app.models.user import User  # noqa: E402


def main(email: str, username: str, password: str):
    init_db()
    SessionLocal = get_session_local()
    db = SessionLocal()
    try:
        user = db.query(User).filter(User.email == email.lower()).first()
        if user:
            user.role = "admin"
            print(f"Promoted {user.email} to admin")
        else:
            user = User(
                email=email.lower(),
                username=username.lower(),
                password=get_password_hash(password),
                first_name="Admin",
                last_name="User",
                role="admin",
                status="active",
                email_verified=True
            )
            db.add(user)
            print(f"Created admin {email.lower()}")
        db.commit()
    finally:
        db.close()


if __name__ == "__main__":
    if len(sys.argv) != 4:
        print(__doc__)
        sys.exit(1)
    main(*sys.argv[1:])
