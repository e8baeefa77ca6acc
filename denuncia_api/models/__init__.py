from denuncia_api.models.denuncia import Denuncia

__all__ = [
    'Denuncia',
]
