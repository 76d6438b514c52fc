"""Basic usage example for encodable declarations."""

from typing import Optional

from sqlalchemy import ForeignKey, String, create_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, relationship

from encodable import declare_encodable, declare_unencodable, register, serialize
from encodable.config import configure_logging


class Base(DeclarativeBase):
    pass


@register
class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    login: Mapped[str] = mapped_column(String(48))
    email: Mapped[str] = mapped_column(String(128))
    encrypted_password: Mapped[str] = mapped_column(String(60))

    permissions: Mapped[list["Permission"]] = relationship(back_populates="user")

    def greeting(self) -> str:
        return f"Hello, {self.login}"


@register
class Permission(Base):
    __tablename__ = "permissions"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id"))
    name: Mapped[str] = mapped_column(String(64))

    user: Mapped[Optional[User]] = relationship(back_populates="permissions")


# Expose login as "handle", add the greeting and nest permissions
declare_encodable(User, {"login": "handle"}, "id", "greeting", "permissions")
declare_unencodable(Permission, "user_id")


def main():
    """Demonstrate declarations on an in-memory database."""
    configure_logging()
    engine = create_engine("sqlite://")
    Base.metadata.create_all(engine)

    with Session(engine) as session:
        user = User(login="flipsasser", email="flip@foobar.com", encrypted_password="x" * 60)
        user.permissions.append(Permission(name="create_blog_posts"))
        session.add(user)
        session.commit()

        # {'id': 1, 'handle': 'flipsasser', 'greeting': 'Hello, flipsasser',
        #  'permissions': [{'id': 1, 'name': 'create_blog_posts'}]}
        print(serialize(user))

        # The only option bypasses declarations entirely
        print(serialize(user, {"only": ["email"]}))


if __name__ == "__main__":
    main()
