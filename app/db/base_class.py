from typing import Any
from sqlalchemy.orm import as_declarative, declared_attr

@as_declarative()
class Base:
    id: Any
    __name__: str

    # แปลงชื่อ Class เป็นชื่อ Table อัตโนมัติ (เช่น Customer -> customer)
    # ตารางหลักในโปรเจกต์นี้กำหนด __tablename__ เองอยู่แล้ว
    @declared_attr
    def __tablename__(cls) -> str:
        return cls.__name__.lower()
