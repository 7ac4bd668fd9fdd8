"""Reference elements, vector Lagrange elements, geometry maps and cell values."""
