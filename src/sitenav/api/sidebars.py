"""Sidebar API endpoints.

Provides sidebar trees and per-document navigation context
(breadcrumbs and previous/next links).
"""

from aiohttp import web

from sitenav.app_keys import sidebar_loader_key


def create_sidebar_routes() -> list[web.RouteDef]:
    return [
        web.get("/api/sidebars", list_sidebars),
        web.get("/api/sidebars/{name}", get_sidebar),
        web.get("/api/docs/{doc_id:.+}", get_document_context),
    ]


async def list_sidebars(request: web.Request) -> web.Response:
    navigation = request.app[sidebar_loader_key].load()
    return web.json_response({"sidebars": list(navigation.sidebars)})


async def get_sidebar(request: web.Request) -> web.Response:
    name = request.match_info["name"]
    navigation = request.app[sidebar_loader_key].load()

    tree = navigation.sidebars.get(name)
    if tree is None:
        return web.json_response(
            {"error": "Sidebar not found", "name": name},
            status=404,
        )
    return web.json_response(tree.to_dict())


async def get_document_context(request: web.Request) -> web.Response:
    doc_id = request.match_info["doc_id"].strip("/")
    navigation = request.app[sidebar_loader_key].load()

    tree = navigation.find_sidebar(doc_id)
    doc = tree.get_document(doc_id) if tree is not None else None
    if tree is None or doc is None:
        return web.json_response(
            {"error": "Document not in any sidebar", "id": doc_id},
            status=404,
        )

    pagination = tree.get_pagination(doc_id)
    return web.json_response(
        {
            "id": doc.id,
            "title": doc.title,
            "sidebar": tree.name,
            "breadcrumbs": list(tree.get_breadcrumbs(doc_id) or ()),
            "previous": pagination.previous.to_dict() if pagination and pagination.previous else None,
            "next": pagination.next.to_dict() if pagination and pagination.next else None,
        },
    )
