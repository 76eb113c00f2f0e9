"""
Cliente de la API v2 de Webflow CMS (colecciones, items y publicacion).
"""
