import json

import pytest
from fastapi import Request
from fastapi.testclient import TestClient
from starlette.exceptions import HTTPException as StarletteHTTPException

from denuncia_api.core.config import settings
from denuncia_api.core.errors import http_exception_handler
from denuncia_api.db.session import get_engine
from denuncia_api.main import app


def _boom():
    raise RuntimeError('boom')


def test_health(client):
    response = client.get('/api/health')
    assert response.status_code == 200
    body = response.json()
    assert body['status'] == 'OK'
    assert body['message'] == 'Servidor funcionando corretamente'
    assert body['timestamp']
    assert response.headers['X-Content-Type-Options'] == 'nosniff'
    assert response.headers['X-Frame-Options'] == 'SAMEORIGIN'
    assert response.headers['RateLimit-Limit'] == '100'
    assert response.headers['RateLimit-Remaining'] == '99'


def test_general_limit_applies_to_health(client):
    for _ in range(100):
        assert client.get('/api/health').status_code == 200

    blocked = client.get('/api/health')
    assert blocked.status_code == 429
    assert blocked.json() == {
        'error': 'Muitas tentativas. Tente novamente em 15 minutos.',
        'code': 'RATE_LIMIT_EXCEEDED',
    }
    assert blocked.headers['RateLimit-Remaining'] == '0'


def test_unknown_route(client):
    response = client.get('/api/nao-existe')
    assert response.status_code == 404
    assert response.json() == {
        'error': 'Rota não encontrada',
        'code': 'NOT_FOUND',
        'path': '/api/nao-existe',
    }


def test_unsupported_method_is_not_found(client):
    response = client.delete('/api/denuncias')
    assert response.status_code == 404
    assert response.json()['code'] == 'NOT_FOUND'


def test_cors_preflight_allows_frontend(client):
    origin = settings.cors_origins[0]
    response = client.options(
        '/api/denuncias',
        headers={'Origin': origin, 'Access-Control-Request-Method': 'POST'},
    )
    assert response.status_code == 200
    assert response.headers['access-control-allow-origin'] == origin
    assert response.headers['access-control-allow-credentials'] == 'true'


def test_unhandled_error_echoes_message_outside_production():
    app.dependency_overrides[get_engine] = _boom
    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get('/api/estatisticas')
    assert response.status_code == 500
    assert response.json() == {
        'error': 'Erro interno do servidor',
        'code': 'INTERNAL_ERROR',
        'message': 'boom',
    }


def test_unhandled_error_hides_message_in_production(monkeypatch):
    monkeypatch.setattr(settings, 'ENV', 'production')
    app.dependency_overrides[get_engine] = _boom
    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get('/api/estatisticas')
    assert response.status_code == 500
    assert response.json() == {'error': 'Erro interno do servidor', 'code': 'INTERNAL_ERROR'}


@pytest.mark.anyio
async def test_bad_request_http_exception_maps_to_invalid_coordinates():
    request = Request({'type': 'http', 'method': 'POST', 'path': '/api/denuncias', 'headers': [], 'query_string': b''})
    response = await http_exception_handler(
        request,
        StarletteHTTPException(status_code=400, detail='There was an error parsing the body'),
    )
    assert response.status_code == 400
    assert json.loads(response.body) == {'error': 'Corpo da requisição inválido', 'code': 'INVALID_COORDINATES'}
