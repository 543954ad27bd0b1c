import pytest

from ideaboard.server import shared
from ideaboard.server.user_auth import SESSION_API_KEY_HEADER


def _create_idea(client, **body):
    response = client.post('/api/ideas', json={'title': 'An idea', **body})
    assert response.status_code == 201, response.text
    return response.json()


def _create_group(client, name='Launch', color='#3b82f6'):
    response = client.post('/api/groups', json={'name': name, 'color': color})
    assert response.status_code == 201, response.text
    return response.json()


def test_create_and_get_idea_uses_camel_case(client):
    idea = _create_idea(client, title='  Ship it  ', canvasX=12.5, canvasY=-4, priority='high')

    assert idea['title'] == 'Ship it'
    assert idea['canvasX'] == 12.5
    assert idea['canvasY'] == -4
    assert idea['groupId'] is None
    assert idea['priority'] == 'high'
    assert idea['completed'] is False
    assert 'createdAt' in idea and 'updatedAt' in idea

    fetched = client.get(f"/api/ideas/{idea['id']}").json()
    assert fetched == idea


def test_create_idea_validation(client):
    assert client.post('/api/ideas', json={'title': '   '}).status_code == 400
    assert client.post('/api/ideas', json={'title': 'x', 'priority': 'urgent'}).status_code == 422
    assert client.post('/api/ideas', json={'title': 'x', 'groupId': 'missing'}).status_code == 400


def test_missing_idea_is_404(client):
    assert client.get('/api/ideas/nope').status_code == 404
    assert client.put('/api/ideas/nope', json={'title': 'x'}).status_code == 404
    assert client.delete('/api/ideas/nope').status_code == 404


def test_partial_update(client):
    group = _create_group(client)
    idea = _create_idea(client, description='keep me')

    response = client.put(
        f"/api/ideas/{idea['id']}",
        json={'canvasX': 100, 'canvasY': 50, 'groupId': group['id'], 'completed': True},
    )
    assert response.status_code == 200
    updated = response.json()
    assert (updated['canvasX'], updated['canvasY']) == (100, 50)
    assert updated['groupId'] == group['id']
    assert updated['completed'] is True
    assert updated['description'] == 'keep me'
    assert updated['title'] == idea['title']

    # An explicit null moves the idea out of its group
    cleared = client.put(f"/api/ideas/{idea['id']}", json={'groupId': None}).json()
    assert cleared['groupId'] is None
    assert cleared['canvasX'] == 100


def test_title_update_keeps_position_from_bulk_patch(client):
    idea = _create_idea(client, canvasX=0, canvasY=0)
    client.patch(
        '/api/ideas/positions',
        json={'positions': [{'id': idea['id'], 'canvasX': 150, 'canvasY': 100}]},
    )

    renamed = client.put(f"/api/ideas/{idea['id']}", json={'title': 'Renamed'}).json()

    assert renamed['title'] == 'Renamed'
    assert (renamed['canvasX'], renamed['canvasY']) == (150, 100)


def test_bulk_position_update(client):
    a = _create_idea(client, title='A')
    b = _create_idea(client, title='B')

    response = client.patch(
        '/api/ideas/positions',
        json={
            'positions': [
                {'id': a['id'], 'canvasX': 10, 'canvasY': 20},
                {'id': b['id'], 'canvasX': 60, 'canvasY': 70},
                {'id': 'ghost', 'canvasX': 0, 'canvasY': 0},
            ]
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body['missing'] == ['ghost']
    assert {i['id']: (i['canvasX'], i['canvasY']) for i in body['ideas']} == {
        a['id']: (10, 20),
        b['id']: (60, 70),
    }
    assert client.get(f"/api/ideas/{b['id']}").json()['canvasX'] == 60


def test_delete_idea(client):
    idea = _create_idea(client)
    response = client.delete(f"/api/ideas/{idea['id']}")
    assert response.status_code == 204
    assert client.get('/api/ideas').json() == []


@pytest.mark.parametrize(
    'color',
    ['#fff', '#A1B2C3', 'rgb(1, 2, 3)', 'rgba(1,2,3,0.5)', 'hsl(120, 50%, 50%)',
     'hsla(120,50%,50%,.3)', 'Teal', 'emerald'],
)
def test_valid_group_colors(client, color):
    assert client.post('/api/groups', json={'name': 'G', 'color': color}).status_code == 201


@pytest.mark.parametrize('color', ['', '#12', 'rgb(1,2)', 'hsl(1,2,3)', 'chartreuse', 'url(x)'])
def test_invalid_group_colors(client, color):
    assert client.post('/api/groups', json={'name': 'G', 'color': color}).status_code == 422


def test_group_crud_and_ideas(client):
    group = _create_group(client)
    inside = _create_idea(client, title='Inside', groupId=group['id'])
    outside = _create_idea(client, title='Outside')

    assert client.get(f"/api/groups/{group['id']}").json()['name'] == 'Launch'
    with_ideas = client.get(f"/api/groups/{group['id']}/with-ideas").json()
    assert with_ideas['color'] == '#3b82f6'
    assert [i['id'] for i in with_ideas['ideas']] == [inside['id']]
    assert [i['id'] for i in client.get(f"/api/groups/{group['id']}/ideas").json()] == [inside['id']]
    assert [i['id'] for i in client.get('/api/ideas/unassigned').json()] == [outside['id']]

    updated = client.put(f"/api/groups/{group['id']}", json={'color': 'red'}).json()
    assert updated['color'] == 'red'
    assert updated['name'] == 'Launch'
    assert client.put(f"/api/groups/{group['id']}", json={'color': 'nope'}).status_code == 422
    assert client.get('/api/groups/missing').status_code == 404


def test_deleting_group_unassigns_ideas_and_drops_sections(client):
    group = _create_group(client)
    idea = _create_idea(client, groupId=group['id'])
    section = client.post(
        '/api/todo-sections', json={'groupId': group['id'], 'title': 'Backlog'}
    ).json()

    assert client.delete(f"/api/groups/{group['id']}").status_code == 204

    assert client.get(f"/api/ideas/{idea['id']}").json()['groupId'] is None
    assert client.get(f"/api/groups/{group['id']}").status_code == 404
    assert client.put(f"/api/todo-sections/{section['id']}", json={'title': 'x'}).status_code == 404
    assert client.delete(f"/api/groups/{group['id']}").status_code == 404


def test_todo_sections(client):
    group = _create_group(client)
    url = '/api/todo-sections'

    first = client.post(url, json={'groupId': group['id'], 'title': 'Now'}).json()
    second = client.post(url, json={'groupId': group['id'], 'title': 'Later'}).json()
    assert (first['position'], second['position']) == (0, 1)
    assert client.post(url, json={'groupId': 'missing', 'title': 'x'}).status_code == 404
    assert client.post(url, json={'groupId': group['id'], 'title': ' '}).status_code == 400

    moved = client.put(f"{url}/{second['id']}", json={'position': -1}).json()
    assert moved['position'] == -1
    listed = client.get(f"/api/groups/{group['id']}/todo-sections").json()
    assert [s['title'] for s in listed] == ['Later', 'Now']

    assert client.delete(f"{url}/{first['id']}").status_code == 204
    assert client.delete(f"{url}/{first['id']}").status_code == 404


def test_todo_list_summaries(client):
    group = _create_group(client)
    _create_idea(client, groupId=group['id'], priority='high', completed=True)
    _create_idea(client, groupId=group['id'], priority='high')
    _create_idea(client, groupId=group['id'], priority='low')
    _create_idea(client)

    summaries = client.get('/api/todo-lists').json()

    assert len(summaries) == 1
    summary = summaries[0]
    assert summary['group']['id'] == group['id']
    assert summary['total'] == 3
    assert summary['completed'] == 1
    assert summary['priorities'] == {'low': 1, 'medium': 0, 'high': 2, 'critical': 0}


def test_health(client):
    assert client.get('/health').status_code == 200
    assert client.get('/alive').json() == {'status': 'ok'}


class TestSessionApiKeys:
    @pytest.fixture(autouse=True)
    def keys(self, monkeypatch):
        monkeypatch.setattr(shared.config, 'session_api_keys', {'key-a': 'alice', 'key-b': 'bob'})

    def test_missing_or_unknown_key_is_rejected(self, client):
        assert client.get('/api/ideas').status_code == 401
        response = client.get('/api/ideas', headers={SESSION_API_KEY_HEADER: 'wrong'})
        assert response.status_code == 401

    def test_boards_are_per_user(self, client):
        alice = {SESSION_API_KEY_HEADER: 'key-a'}
        bob = {SESSION_API_KEY_HEADER: 'key-b'}

        created = client.post('/api/ideas', json={'title': 'Secret'}, headers=alice).json()

        assert created['userId'] == 'alice'
        assert [i['id'] for i in client.get('/api/ideas', headers=alice).json()] == [created['id']]
        assert client.get('/api/ideas', headers=bob).json() == []
        assert client.get(f"/api/ideas/{created['id']}", headers=bob).status_code == 404
