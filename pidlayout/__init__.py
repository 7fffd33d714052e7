"""pidlayout — automatic P&ID layout, routing and annotation engine."""
