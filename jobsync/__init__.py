"""
Sincronizacion de ofertas de empleo hacia Webflow CMS.
"""
__version__ = "1.0.0"
