from datetime import datetime

import pytest

from marketplace.extensions import db
from marketplace.models import AdminLog
from marketplace.services.activity_log_service import log_admin_activity


@pytest.fixture
def seeded_logs(app, admin_id, make_user):
    other_admin = make_user(id='admin-2')
    rows = [
        (admin_id, 'UPDATE_USER_STATUS', datetime(2024, 3, 1, 9, 0)),
        (admin_id, 'UPDATE_USER_STATUS', datetime(2024, 3, 1, 17, 30)),
        (other_admin, 'UPDATE_BUSINESS_ACCOUNT_STATUS',
         datetime(2024, 3, 5, 12, 0)),
    ]
    ids = []
    with app.app_context():
        for admin, action, created_at in rows:
            entry = AdminLog(admin_id=admin, action=action,
                             target_type='user', details={},
                             created_at=created_at)
            db.session.add(entry)
            db.session.flush()
            ids.append(entry.id)
        db.session.commit()
    return ids


def test_logs_require_admin(client, auth, make_user):
    resp = client.get('/api/admin/logs', headers=auth(make_user()))
    assert resp.status_code == 403


def test_list_logs_newest_first(client, auth, admin_id, seeded_logs):
    body = client.get('/api/admin/logs', headers=auth(admin_id)).get_json()
    assert body['total'] == 3
    assert body['limit'] == 50
    assert [e['id'] for e in body['logs']] == list(reversed(seeded_logs))


def test_list_logs_filters(client, auth, admin_id, seeded_logs):
    def ids(query):
        body = client.get('/api/admin/logs' + query,
                          headers=auth(admin_id)).get_json()
        return [e['id'] for e in body['logs']]

    assert ids('?adminId=admin-2') == [seeded_logs[2]]
    assert ids('?action=UPDATE_USER_STATUS') == [seeded_logs[1],
                                                seeded_logs[0]]
    assert ids('?startDate=2024-03-02') == [seeded_logs[2]]
    assert ids('?endDate=2024-03-01T12:00:00') == [seeded_logs[0]]
    assert ids('?startDate=2024-03-01T10:00:00Z'
               '&endDate=2024-03-04T00:00:00Z') == [seeded_logs[1]]


def test_list_logs_rejects_bad_date(client, auth, admin_id):
    resp = client.get('/api/admin/logs?startDate=yesterday',
                      headers=auth(admin_id))
    assert resp.status_code == 400
    assert resp.get_json()['message'] == 'Invalid date'


def test_summary(client, auth, admin_id, seeded_logs):
    body = client.get('/api/admin/logs/summary',
                      headers=auth(admin_id)).get_json()
    assert body['actionCounts'] == [
        {'action': 'UPDATE_USER_STATUS', 'count': 2},
        {'action': 'UPDATE_BUSINESS_ACCOUNT_STATUS', 'count': 1},
    ]
    assert body['timeline'] == [
        {'date': '2024-03-01', 'count': 2},
        {'date': '2024-03-05', 'count': 1},
    ]


def test_get_single_log(client, auth, admin_id, seeded_logs):
    resp = client.get(f'/api/admin/logs/{seeded_logs[0]}',
                      headers=auth(admin_id))
    assert resp.status_code == 200
    log = resp.get_json()['log']
    assert log['action'] == 'UPDATE_USER_STATUS'
    assert log['admin_email'] == 'admin-1@example.com'

    resp = client.get('/api/admin/logs/missing', headers=auth(admin_id))
    assert resp.status_code == 404
    assert resp.get_json()['message'] == 'Log not found'


def test_log_admin_activity_records_entry(app, admin_id):
    with app.test_request_context(environ_base={'REMOTE_ADDR': '10.0.0.7'}):
        entry = log_admin_activity(
            admin_id, 'UPDATE_USER_STATUS', target_id=42, target_type='user',
            details={'newStatus': 'active'})
        assert entry is not None
        assert entry.target_id == '42'
        assert entry.ip_address == '10.0.0.7'


def test_log_admin_activity_swallows_failures(app, admin_id, monkeypatch):
    def broken_commit():
        raise RuntimeError('database unavailable')

    with app.app_context():
        monkeypatch.setattr(db.session, 'commit', broken_commit)
        assert log_admin_activity(admin_id, 'UPDATE_USER_STATUS') is None
        assert AdminLog.query.count() == 0
