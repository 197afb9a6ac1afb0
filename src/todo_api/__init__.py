"""
Todo Plans API package.

In-memory todo list service built on FastAPI. Build an application with
`todo_api.main.create_app`, or serve the module-level `todo_api.main:app`.
"""
