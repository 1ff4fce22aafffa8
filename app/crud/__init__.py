from app.crud.users import crud_user

__all__ = [
    "crud_user",
]
