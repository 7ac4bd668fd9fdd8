from .quadrature import QuadratureRule, volume, face, face_to_cell, gauss_legendre

__all__ = ["QuadratureRule", "volume", "face", "face_to_cell", "gauss_legendre"]
