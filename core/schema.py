SCHEMA_SQL = r"""
-- Products (one purchase batch = one row, names repeat across batches)
CREATE TABLE IF NOT EXISTS products (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  name TEXT NOT NULL,
  selling_price REAL NOT NULL DEFAULT 0,
  acquisition_price REAL NOT NULL DEFAULT 0,
  purchase_qty INTEGER NOT NULL DEFAULT 0,   -- lot size at purchase
  remaining INTEGER NOT NULL DEFAULT 0,      -- current unsold stock
  purchase_date TEXT NOT NULL,               -- ISO date
  expiration_date TEXT,                      -- ISO date (optional)
  supplier_name TEXT,
  category TEXT,
  created_at TEXT NOT NULL
);

-- Per-client-tier selling prices (optional, falls back to products.selling_price)
CREATE TABLE IF NOT EXISTS product_tier_prices (
  product_id INTEGER NOT NULL,
  tier TEXT NOT NULL,
  price REAL NOT NULL,
  PRIMARY KEY (product_id, tier),
  FOREIGN KEY (product_id) REFERENCES products(id) ON DELETE CASCADE
);

-- Sales (one row per sold batch; product_id is intentionally not a FK,
-- deleting a product leaves its sales in place)
CREATE TABLE IF NOT EXISTS sales (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  product_id INTEGER NOT NULL,
  client_name TEXT NOT NULL,
  quantity INTEGER NOT NULL,
  sale_date TEXT NOT NULL,                   -- ISO date
  sale_price REAL NOT NULL,                  -- captured at sale time
  created_at TEXT NOT NULL
);

-- Clients
CREATE TABLE IF NOT EXISTS clients (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  name TEXT NOT NULL,
  address TEXT,
  contact_number TEXT,
  account TEXT,
  tin_number TEXT,
  contact_person TEXT,
  created_at TEXT NOT NULL
);

-- Users (role drives the landing page after sign-in)
CREATE TABLE IF NOT EXISTS users (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  email TEXT NOT NULL UNIQUE,
  password_hash TEXT NOT NULL,
  role TEXT NOT NULL
);
"""
