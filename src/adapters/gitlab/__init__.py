"""Cliente de la API REST de GitLab.

Por qué un paquete:
- Agrupa la fachada (`api.GitLabApi`), el paginador (`pager.Pager`) y las APIs
  por recurso (proyectos, usuarios, sesiones).
- Los módulos se importan por ruta (`adapters.gitlab.api`, ...) para no crear
  ciclos con `adapters.http_client`.
"""
