"""
Cliente del feed externo de ofertas (solo lectura).
"""
