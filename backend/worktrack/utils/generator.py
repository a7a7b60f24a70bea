import secrets
import string
from datetime import datetime


def generate_employee_id(count: int, year: int | None = None) -> str:
    year = year or datetime.now().year
    return f"EMP{year}{count + 1:04d}"


def generate_temp_password(length: int = 12) -> str:
    chars = string.ascii_letters + string.digits + "@$#"
    return "".join(secrets.choice(chars) for _ in range(length))
