"""
DataSource description used by the driver adapters.

Entities: ProductTypeEnum, DataSource.
"""

import uuid
from enum import Enum

from pydantic import model_validator
from sqlmodel import Field, SQLModel


class ProductTypeEnum(str, Enum):
    """Supported database product types (postgres, mysql, trino)."""

    POSTGRES = "postgres"
    MYSQL = "mysql"
    TRINO = "trino"


DEFAULT_PORTS: dict[ProductTypeEnum, int] = {
    ProductTypeEnum.POSTGRES: 5432,
    ProductTypeEnum.MYSQL: 3306,
    ProductTypeEnum.TRINO: 8080,
}


class DataSource(SQLModel):
    """Connection parameters for one external database."""

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    name: str = Field(default="", max_length=255)
    product_type: ProductTypeEnum
    host: str = Field(..., min_length=1, max_length=255)
    port: int | None = Field(
        default=None, ge=1, le=65535, description="Defaults per product_type when omitted."
    )
    database: str = Field(..., min_length=1, max_length=255)
    username: str = Field(..., min_length=1, max_length=255)
    password: str = Field(default="", max_length=512)
    use_ssl: bool = Field(
        default=False,
        description="For Trino: use HTTPS (http_scheme='https'). When True, password is required.",
    )
    close_connection_after_execute: bool = Field(
        default=False,
        description="If True, open a fresh connection per attempt and close it afterwards "
        "instead of returning it to a pool.",
    )

    @model_validator(mode="after")
    def default_port(self) -> "DataSource":
        if self.port is None:
            self.port = DEFAULT_PORTS[ProductTypeEnum(self.product_type)]
        return self

    @model_validator(mode="after")
    def trino_ssl_requires_password(self) -> "DataSource":
        if (
            self.product_type == ProductTypeEnum.TRINO
            and self.use_ssl
            and not (self.password and self.password.strip())
        ):
            raise ValueError("Password is required for Trino when using SSL/HTTPS.")
        return self
