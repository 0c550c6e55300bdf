import enum
from sqlalchemy import Column, String, DateTime, Enum
from sqlalchemy.orm import relationship
from .base import Base, new_id, utcnow


class UserRole(str, enum.Enum):
     LANDLORD = "landlord"
     TENANT = "tenant"
     ADMIN = "admin"


class User(Base):
     """
     User model - profile record for landlords, tenants and admins.
     Authentication itself is handled upstream; this table is read for
     names and email addresses when composing notifications.
     """
     __tablename__ = "users"

     id = Column(String(36), primary_key=True, default=new_id)
     email = Column(String(255), unique=True, nullable=True, index=True)
     name = Column(String(200), nullable=False)
     role = Column(
          Enum(UserRole, name="user_role", values_callable=lambda e: [m.value for m in e]),
          nullable=False,
     )
     created_at = Column(DateTime, default=utcnow, nullable=False)

     # Relationships
     preferences = relationship("UserPreference", back_populates="user", uselist=False)

     def __repr__(self):
          return f"<User(id={self.id}, email='{self.email}', role='{self.role.value}')>"
