import os
import sys

# Add the parent directory (backend) to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest
from fastapi.testclient import TestClient

from main import app
from models.analysis import AnalysisResult

SHOP_DBML = """\
// Demo shop schema
Table users {
  guid UUID
  login VARCHAR
  password VARCHAR
  role_id UUID
  created_at TIMESTAMP
}

Table products {
  guid UUID
  title VARCHAR
  price FLOAT
  in_stock BOOL
  tags TEXT[]
}

Table orders {
  guid UUID
  user_id UUID
  total NUMERIC
  Note: 'customer orders'
}

Table order_products {
  order_id UUID
  product_id UUID
}

Table audit_log {
  guid UUID
  payload JSONB
}

Ref: orders.user_id > users.guid
Ref: order_products.order_id > orders.guid
Ref: order_products.product_id > products.guid
"""


@pytest.fixture(scope="session")
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def shop_dbml():
    return SHOP_DBML


@pytest.fixture
def shop_analysis():
    return AnalysisResult.model_validate({
        "project_summary": "A small online shop.",
        "domains": [
            {
                "name": "Catalog",
                "icon": "🛍️",
                "description": "Products",
                "tables": [{"name": "products", "essential": True, "purpose": "Items for sale"}],
            },
            {
                "name": "Sales",
                "icon": "💰",
                "description": "Orders",
                "tables": [
                    {"name": "orders", "essential": True, "purpose": "Orders"},
                    {"name": "order_products", "essential": False, "purpose": "Order lines"},
                ],
            },
        ],
        "auth_tables": [
            {
                "table_name": "users",
                "auth_type": "client",
                "login_fields": ["login", "password"],
                "register_fields": {"login": "", "password": ""},
                "login_body": {"login": "", "password": ""},
                "has_roles": True,
            }
        ],
        "skip_tables": ["order_products"],
        "table_count_total": 5,
        "table_count_essential": 3,
        "table_count_skipped": 1,
    })
