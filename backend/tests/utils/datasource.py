import uuid

from dbexec.models import DataSource, ProductTypeEnum


def make_datasource(
    product_type: ProductTypeEnum = ProductTypeEnum.POSTGRES,
    **overrides: object,
) -> DataSource:
    fields: dict[str, object] = {
        "id": uuid.uuid4(),
        "name": "test",
        "product_type": product_type,
        "host": "localhost",
        "database": "db",
        "username": "u",
        "password": "p",
    }
    fields.update(overrides)
    return DataSource(**fields)
