from sqlalchemy.orm import as_declarative, declared_attr


@as_declarative()
class Base:
    # Secret -> secrets, User -> users
    @declared_attr
    def __tablename__(cls) -> str:
        return f"{cls.__name__.lower()}s"
