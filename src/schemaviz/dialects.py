"""
Dialect metadata and column validators.

Static lookup tables keyed by SQLDialect: data types, which types need or
accept a length, example schemas and SQL keywords. The parser never consults
these; they feed the editor validators and the SQL generator.
"""

from __future__ import annotations

import re
from typing import Dict, List, Sequence

from schemaviz.models import SQLDialect, Table

SQL_DATA_TYPES: Dict[SQLDialect, List[str]] = {
    SQLDialect.MYSQL: [
        "TINYINT", "SMALLINT", "MEDIUMINT", "INT", "INTEGER", "BIGINT",
        "DECIMAL", "NUMERIC", "FLOAT", "DOUBLE", "DOUBLE PRECISION", "REAL", "BIT",
        "CHAR", "VARCHAR", "BINARY", "VARBINARY",
        "TINYTEXT", "TEXT", "MEDIUMTEXT", "LONGTEXT",
        "TINYBLOB", "BLOB", "MEDIUMBLOB", "LONGBLOB",
        "DATE", "TIME", "DATETIME", "TIMESTAMP", "YEAR",
        "BOOLEAN", "BOOL", "JSON", "ENUM", "SET",
        "GEOMETRY", "POINT", "LINESTRING", "POLYGON", "MULTIPOINT",
        "MULTILINESTRING", "MULTIPOLYGON", "GEOMETRYCOLLECTION",
    ],
    SQLDialect.POSTGRESQL: [
        "SMALLINT", "INTEGER", "BIGINT", "SERIAL", "BIGSERIAL",
        "DECIMAL", "NUMERIC", "REAL", "DOUBLE PRECISION", "FLOAT4", "FLOAT8", "MONEY",
        "CHAR", "CHARACTER", "VARCHAR", "CHARACTER VARYING", "TEXT", "BYTEA",
        "DATE", "TIME", "TIMESTAMP", "TIMESTAMPTZ", "INTERVAL",
        "BOOLEAN", "BOOL", "UUID", "JSON", "JSONB", "ARRAY",
        "INET", "CIDR", "MACADDR", "MACADDR8", "TSVECTOR", "TSQUERY",
        "INT4RANGE", "INT8RANGE", "NUMRANGE", "TSRANGE", "TSTZRANGE", "DATERANGE",
        "XML", "BIT", "BIT VARYING",
    ],
    SQLDialect.SQLITE: [
        "INTEGER", "REAL", "TEXT", "BLOB",
        "INT", "TINYINT", "SMALLINT", "MEDIUMINT", "BIGINT", "UNSIGNED BIG INT", "INT2", "INT8",
        "CHARACTER", "VARCHAR", "VARYING CHARACTER", "NCHAR", "NATIVE CHARACTER", "NVARCHAR", "CLOB",
        "DOUBLE", "DOUBLE PRECISION", "FLOAT", "NUMERIC", "DECIMAL",
        "BOOLEAN", "DATE", "DATETIME",
    ],
    SQLDialect.MARIADB: [
        "TINYINT", "SMALLINT", "MEDIUMINT", "INT", "INTEGER", "BIGINT",
        "INT1", "INT2", "INT3", "INT4", "INT8", "MIDDLEINT",
        "DECIMAL", "DEC", "NUMERIC", "FIXED", "NUMBER",
        "FLOAT", "FLOAT4", "FLOAT8", "DOUBLE", "DOUBLE PRECISION", "REAL", "BIT",
        "CHAR", "CHARACTER", "VARCHAR", "CHAR VARYING", "CHARACTER VARYING",
        "BINARY", "VARBINARY", "CHAR BYTE",
        "TINYTEXT", "TEXT", "MEDIUMTEXT", "LONGTEXT",
        "TINYBLOB", "BLOB", "MEDIUMBLOB", "LONGBLOB",
        "LONG", "LONG VARCHAR", "LONG VARBINARY",
        "NATIONAL CHAR", "NATIONAL VARCHAR", "NCHAR", "NVARCHAR",
        "DATE", "TIME", "DATETIME", "TIMESTAMP", "YEAR",
        "BOOLEAN", "BOOL", "JSON", "ENUM", "SET",
        "GEOMETRY", "POINT", "LINESTRING", "POLYGON", "MULTIPOINT",
        "MULTILINESTRING", "MULTIPOLYGON", "GEOMETRYCOLLECTION",
        "INET4", "INET6", "UUID", "VECTOR", "CLOB", "RAW", "VARCHAR2", "SERIAL", "ROW",
    ],
}

REQUIRED_LENGTH_TYPES: Dict[SQLDialect, List[str]] = {
    SQLDialect.MYSQL: ["CHAR", "VARCHAR", "BINARY", "VARBINARY", "BIT"],
    SQLDialect.POSTGRESQL: ["CHAR", "CHARACTER", "VARCHAR", "CHARACTER VARYING", "BIT", "BIT VARYING"],
    SQLDialect.SQLITE: [],
    SQLDialect.MARIADB: [
        "CHAR", "CHARACTER", "VARCHAR", "CHAR VARYING", "CHARACTER VARYING",
        "BINARY", "VARBINARY", "CHAR BYTE", "BIT",
        "NATIONAL CHAR", "NATIONAL VARCHAR", "NCHAR", "NVARCHAR",
    ],
}

OPTIONAL_LENGTH_TYPES: Dict[SQLDialect, List[str]] = {
    SQLDialect.MYSQL: [
        "TINYINT", "SMALLINT", "MEDIUMINT", "INT", "INTEGER", "BIGINT",
        "DECIMAL", "NUMERIC", "FLOAT", "DOUBLE",
    ],
    SQLDialect.POSTGRESQL: ["DECIMAL", "NUMERIC", "TIME", "TIMESTAMP", "TIMESTAMPTZ", "INTERVAL"],
    SQLDialect.SQLITE: [
        "CHARACTER", "VARCHAR", "VARYING CHARACTER", "NCHAR", "NATIVE CHARACTER", "NVARCHAR",
        "NUMERIC", "DECIMAL",
    ],
    SQLDialect.MARIADB: [
        "TINYINT", "SMALLINT", "MEDIUMINT", "INT", "INTEGER", "BIGINT",
        "INT1", "INT2", "INT3", "INT4", "INT8", "MIDDLEINT",
        "DECIMAL", "DEC", "NUMERIC", "FIXED", "NUMBER",
        "FLOAT", "FLOAT4", "FLOAT8", "DOUBLE", "DOUBLE PRECISION", "REAL",
        "TIME", "DATETIME", "TIMESTAMP",
    ],
}

SQL_EXAMPLES: Dict[SQLDialect, str] = {
    SQLDialect.MYSQL: """
CREATE TABLE authors (
  id INT AUTO_INCREMENT PRIMARY KEY,
  name VARCHAR(100) NOT NULL
);

CREATE TABLE tags (
  id INT AUTO_INCREMENT PRIMARY KEY,
  name VARCHAR(50) NOT NULL UNIQUE
);

CREATE TABLE profiles (
  id INT AUTO_INCREMENT PRIMARY KEY,
  author_id INT UNIQUE,
  bio TEXT,
  FOREIGN KEY (author_id) REFERENCES authors(id)
);

CREATE TABLE books (
  id INT AUTO_INCREMENT PRIMARY KEY,
  title VARCHAR(200) NOT NULL,
  author_id INT,
  FOREIGN KEY (author_id) REFERENCES authors(id)
);

CREATE TABLE book_tags (
  book_id INT,
  tag_id INT,
  PRIMARY KEY (book_id, tag_id),
  FOREIGN KEY (book_id) REFERENCES books(id),
  FOREIGN KEY (tag_id) REFERENCES tags(id)
);
""".strip(),
    SQLDialect.POSTGRESQL: """
CREATE TABLE customers (
  id SERIAL PRIMARY KEY,
  name VARCHAR(100) NOT NULL
);

CREATE TABLE products (
  id SERIAL PRIMARY KEY,
  name VARCHAR(100),
  price NUMERIC(10,2)
);

CREATE TABLE addresses (
  id SERIAL PRIMARY KEY,
  customer_id INT UNIQUE,
  street TEXT,
  city TEXT,
  FOREIGN KEY (customer_id) REFERENCES customers(id)
);

CREATE TABLE orders (
  id SERIAL PRIMARY KEY,
  customer_id INT,
  order_date TIMESTAMP DEFAULT NOW(),
  FOREIGN KEY (customer_id) REFERENCES customers(id)
);

CREATE TABLE order_products (
  order_id INT,
  product_id INT,
  PRIMARY KEY (order_id, product_id),
  FOREIGN KEY (order_id) REFERENCES orders(id),
  FOREIGN KEY (product_id) REFERENCES products(id)
);
""".strip(),
    SQLDialect.MARIADB: """
CREATE TABLE employees (
  id INT AUTO_INCREMENT PRIMARY KEY,
  name VARCHAR(100) NOT NULL
);

CREATE TABLE labels (
  id INT AUTO_INCREMENT PRIMARY KEY,
  name VARCHAR(50) NOT NULL UNIQUE
);

CREATE TABLE passports (
  id INT AUTO_INCREMENT PRIMARY KEY,
  employee_id INT UNIQUE,
  passport_number VARCHAR(50),
  FOREIGN KEY (employee_id) REFERENCES employees(id)
);

CREATE TABLE tasks (
  id INT AUTO_INCREMENT PRIMARY KEY,
  title VARCHAR(200),
  employee_id INT,
  FOREIGN KEY (employee_id) REFERENCES employees(id)
);

CREATE TABLE task_labels (
  task_id INT,
  label_id INT,
  PRIMARY KEY (task_id, label_id),
  FOREIGN KEY (task_id) REFERENCES tasks(id),
  FOREIGN KEY (label_id) REFERENCES labels(id)
);
""".strip(),
    SQLDialect.SQLITE: """
CREATE TABLE doctors (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  name TEXT NOT NULL
);

CREATE TABLE tags (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  name TEXT NOT NULL
);

CREATE TABLE licenses (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  doctor_id INTEGER UNIQUE,
  license_number TEXT,
  FOREIGN KEY (doctor_id) REFERENCES doctors(id)
);

CREATE TABLE appointments (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  doctor_id INTEGER,
  patient_name TEXT,
  appointment_date TEXT,
  FOREIGN KEY (doctor_id) REFERENCES doctors(id)
);

CREATE TABLE appointment_tags (
  appointment_id INTEGER,
  tag_id INTEGER,
  PRIMARY KEY (appointment_id, tag_id),
  FOREIGN KEY (appointment_id) REFERENCES appointments(id),
  FOREIGN KEY (tag_id) REFERENCES tags(id)
);
""".strip(),
}

SQL_KEYWORDS: List[str] = [
    # DDL
    "CREATE", "ALTER", "DROP", "TRUNCATE", "RENAME", "TABLE", "DATABASE", "SCHEMA",
    "INDEX", "VIEW", "TRIGGER", "PROCEDURE", "FUNCTION",
    # Constraints
    "CONSTRAINT", "PRIMARY", "FOREIGN", "UNIQUE", "CHECK", "KEY", "REFERENCES",
    "CASCADE", "RESTRICT", "SET", "NO", "ACTION",
    # DML
    "INSERT", "UPDATE", "DELETE", "SELECT", "REPLACE", "MERGE", "UPSERT",
    "FROM", "WHERE", "GROUP", "HAVING", "ORDER", "BY", "LIMIT", "OFFSET",
    "DISTINCT", "ALL", "TOP", "FETCH", "FIRST", "ROWS", "ONLY",
    "JOIN", "INNER", "LEFT", "RIGHT", "FULL", "OUTER", "CROSS", "NATURAL", "ON", "USING",
    "UNION", "INTERSECT", "EXCEPT", "MINUS", "WITH", "RECURSIVE", "AS",
    "EXISTS", "IN", "ANY", "SOME",
    "CASE", "WHEN", "THEN", "ELSE", "END", "IF", "IFNULL", "NULLIF", "COALESCE",
    # Aggregates and windows
    "COUNT", "SUM", "AVG", "MIN", "MAX", "GROUP_CONCAT", "STRING_AGG",
    "OVER", "PARTITION", "ROW_NUMBER", "RANK", "DENSE_RANK", "LEAD", "LAG",
    "FIRST_VALUE", "LAST_VALUE", "NTILE",
    # Column modifiers
    "NOT", "NULL", "DEFAULT", "AUTO_INCREMENT", "AUTOINCREMENT", "IDENTITY",
    "UNSIGNED", "SIGNED", "ZEROFILL", "BINARY", "COLLATE",
    # Transactions and access control
    "BEGIN", "COMMIT", "ROLLBACK", "SAVEPOINT", "TRANSACTION", "WORK",
    "GRANT", "REVOKE", "DENY", "ROLE", "USER", "PRIVILEGES",
    # Operators and literals
    "AND", "OR", "BETWEEN", "LIKE", "ILIKE", "REGEXP", "RLIKE",
    "IS", "ISNULL", "ISNOTNULL", "TRUE", "FALSE", "UNKNOWN", "ESCAPE",
    "CAST", "CONVERT", "EXTRACT",
    "CURRENT_DATE", "CURRENT_TIME", "CURRENT_TIMESTAMP", "NOW",
    "CURRENT_USER", "SESSION_USER", "SYSTEM_USER",
    # Misc
    "TEMPORARY", "TEMP", "GLOBAL", "LOCAL", "SESSION",
    "EXPLAIN", "DESCRIBE", "DESC", "SHOW", "USE",
]

IDENTIFIER_PATTERN = re.compile(r'^[a-zA-Z_][a-zA-Z0-9_]*$')


def requires_length(data_type: str, dialect: SQLDialect) -> bool:
    """Return True if the type must be declared with a length."""
    return data_type.upper() in REQUIRED_LENGTH_TYPES.get(dialect, [])


def can_have_length(data_type: str, dialect: SQLDialect) -> bool:
    """Return True if the type accepts a length, required or optional."""
    data_type = data_type.upper()
    return (
        data_type in REQUIRED_LENGTH_TYPES.get(dialect, [])
        or data_type in OPTIONAL_LENGTH_TYPES.get(dialect, [])
    )


def is_feature_supported(feature: str, dialect: SQLDialect) -> bool:
    """Check whether a column feature can be expressed in a dialect."""
    if feature == "autoIncrement":
        # PostgreSQL uses SERIAL types instead
        return dialect != SQLDialect.POSTGRESQL
    return True


def is_valid_table_name(name: str, tables: Sequence[Table]) -> bool:
    """A new table name must be a plain identifier not already in use."""
    name = name.strip()
    if not name:
        return False
    if any(t.name.lower() == name.lower() for t in tables):
        return False
    return IDENTIFIER_PATTERN.match(name) is not None


def table_has_primary_key(table_name: str, tables: Sequence[Table], exclude_column: str = "") -> bool:
    """Return True if the table has a primary key column other than ``exclude_column``."""
    for table in tables:
        if table.name == table_name:
            return any(c.primary_key and c.name != exclude_column for c in table.columns)
    return False
