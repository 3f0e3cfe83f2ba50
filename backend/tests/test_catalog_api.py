def _faculty(client, name='Engineering', institute_id=1):
    r = client.post('/api/faculties', json={'name': name, 'instituteId': institute_id})
    assert r.status_code == 201
    return r.json()['faculty_id']


def test_faculties_create_and_filter(client):
    r = client.post('/api/faculties', json={'name': 'Science', 'instituteId': 7})
    assert r.status_code == 201
    body = r.json()
    assert body['name'] == 'Science'
    assert isinstance(body['faculty_id'], int)
    _faculty(client, 'Arts', 8)

    assert len(client.get('/api/faculties').json()) == 2
    only = client.get('/api/faculties', params={'instituteId': 7}).json()
    assert [f['name'] for f in only] == ['Science']


def test_faculty_requires_name_and_institute(client):
    r = client.post('/api/faculties', json={'name': 'Science'})
    assert r.status_code == 400
    assert r.json() == {'error': 'Name and Institute ID are required'}


def test_courses_require_existing_faculty(client):
    r = client.post('/api/courses', json={'name': 'Algebra'})
    assert r.status_code == 400
    assert r.json() == {'error': 'Name and Faculty ID are required'}

    r = client.post('/api/courses', json={'name': 'Algebra', 'faculty_id': 999})
    assert r.status_code == 400
    assert r.json() == {'error': 'Invalid faculty ID'}


def test_courses_create_list_and_get(client):
    fid = _faculty(client)
    other = _faculty(client, 'Medicine', 2)
    r = client.post('/api/courses', json={'name': 'Algebra', 'faculty_id': fid})
    assert r.status_code == 201
    course = r.json()
    assert course['name'] == 'Algebra'
    assert course['faculty_id'] == fid
    client.post('/api/courses', json={'name': 'Anatomy', 'faculty_id': other})

    assert len(client.get('/api/courses').json()) == 2
    filtered = client.get('/api/courses', params={'facultyId': fid}).json()
    assert [c['name'] for c in filtered] == ['Algebra']

    detail = client.get(f"/api/courses/{course['id']}")
    assert detail.status_code == 200
    assert detail.json() == {'id': course['id'], 'name': 'Algebra', 'faculty_id': fid}


def test_missing_course_is_404(client):
    r = client.get('/api/courses/12345')
    assert r.status_code == 404
    assert r.json() == {'error': 'Course not found.'}


def test_institutes_lifecycle(client):
    r = client.post('/api/institutes', json={'name': 'North College', 'email': 'n@college.edu', 'password': 'pw'})
    assert r.status_code == 201
    assert r.json()['message'] == 'Institute added successfully'
    iid = r.json()['institute_id']

    listed = client.get('/api/institutes').json()
    assert listed == [{'institute_id': iid, 'name': 'North College', 'email': 'n@college.edu'}]

    # administratively added institutes share the Institution login partition
    login = client.post('/api/users/login', json={'email': 'n@college.edu', 'password': 'pw', 'role': 'Institution'})
    assert login.status_code == 200

    d = client.delete(f'/api/institutes/{iid}')
    assert d.status_code == 200
    assert d.json() == {'message': 'Institute deleted successfully'}
    assert client.get('/api/institutes').json() == []


def test_institute_requires_all_fields(client):
    r = client.post('/api/institutes', json={'name': 'North College', 'email': 'n@college.edu'})
    assert r.status_code == 400
    assert r.json() == {'error': 'Name, email, and password are required'}


def test_delete_unknown_institute_still_succeeds(client):
    r = client.delete('/api/institutes/999')
    assert r.status_code == 200


def test_applications_flow(client):
    r = client.post('/api/applications', json={'courseId': 3, 'name': 'Sam', 'email': 'sam@x.com'})
    assert r.status_code == 201
    assert r.json() == {'message': 'Application submitted successfully.'}

    apps = client.get('/api/applications', params={'courseId': 3}).json()
    assert len(apps) == 1
    assert apps[0]['status'] == 'pending'
    assert apps[0]['email'] == 'sam@x.com'
    assert client.get('/api/applications', params={'courseId': 4}).json() == []

    u = client.put(f"/api/applications/{apps[0]['id']}", json={'status': 'approved'})
    assert u.status_code == 200
    assert u.json() == {'message': 'Application status updated to approved'}
    assert client.get('/api/applications', params={'courseId': 3}).json()[0]['status'] == 'approved'


def test_application_validation(client):
    r = client.post('/api/applications', json={'courseId': 3, 'name': 'Sam'})
    assert r.status_code == 400
    assert r.json() == {'error': 'Course ID, name, and email are required.'}

    r = client.get('/api/applications')
    assert r.status_code == 400
    assert r.json() == {'error': 'Course ID is required.'}

    r = client.put('/api/applications/1', json={'status': 'maybe'})
    assert r.status_code == 400
    assert r.json() == {'error': 'Invalid status value.'}


def test_non_integer_id_is_bad_request(client):
    r = client.get('/api/courses/abc')
    assert r.status_code == 400
    assert r.json() == {'error': 'Invalid request'}
