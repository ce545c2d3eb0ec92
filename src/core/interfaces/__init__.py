"""Contratos (Protocol) entre el Core y los adaptadores.

Hoy solo `page_source`: lo que el paginador necesita de una API.
"""
