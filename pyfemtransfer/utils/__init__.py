from .meshgen import structured_interval, structured_quad, structured_triangles

__all__ = ["structured_interval", "structured_quad", "structured_triangles"]
