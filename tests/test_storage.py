import pytest
from algotrace.catalog import Catalog
from algotrace.config import DEFAULT_CATALOG_PATH
from algotrace.models import ProjectCreate, ProjectUpdate, UserCreate, VisualizationCreate
from algotrace.storage import Storage, StorageError, hash_password, verify_password

def _seeded(path=None):
    store = Storage(path)
    store.seed_algorithms(Catalog.from_file(DEFAULT_CATALOG_PATH))
    return store

def test_password_hashing():
    stored = hash_password("s3cret")
    assert stored != "s3cret"
    assert verify_password("s3cret", stored)
    assert not verify_password("wrong", stored)

def test_users_unique_by_username():
    store = Storage()
    user = store.create_user(UserCreate(username="ada", password="pw"))
    assert store.get_user_by_username("ada") == user
    with pytest.raises(StorageError):
        store.create_user(UserCreate(username="ada", password="other"))

def test_seed_runs_once_and_sorts():
    store = _seeded()
    count = len(store.algorithms)
    assert count > 0
    assert store.seed_algorithms(Catalog.from_file(DEFAULT_CATALOG_PATH)) == 0
    cats = [a.category for a in store.get_all_algorithms()]
    assert cats == sorted(cats)
    assert all(a.category == "graph" for a in store.get_algorithms_by_category("graph"))

def test_project_requires_existing_user():
    store = Storage()
    with pytest.raises(StorageError):
        store.create_project(ProjectCreate(user_id="ghost", name="p", language="python", code=""))
    # anonymous projects are allowed
    assert store.create_project(ProjectCreate(name="p", language="python", code="")).user_id is None

def test_update_and_public_listing():
    store = Storage()
    project = store.create_project(ProjectCreate(name="p", language="python", code="x"))
    assert store.get_public_projects() == []
    updated = store.update_project(project.id, ProjectUpdate(is_public=True, name=None))
    assert updated.is_public and updated.name == "p"
    assert updated.updated_at >= project.updated_at
    assert [p.id for p in store.get_public_projects()] == [project.id]
    assert store.update_project("missing", ProjectUpdate(name="q")) is None

def test_visualization_references_and_project_delete():
    store = _seeded()
    algorithm = store.get_all_algorithms()[0]
    project = store.create_project(ProjectCreate(name="p", language="python", code="x"))
    with pytest.raises(StorageError):
        store.create_visualization(VisualizationCreate(project_id="nope", steps=[]))
    with pytest.raises(StorageError):
        store.create_visualization(VisualizationCreate(algorithm_id="nope", steps=[]))
    vis = store.create_visualization(VisualizationCreate(project_id=project.id, algorithm_id=algorithm.id,
                                                         steps=[{"action": "EXECUTE"}]))
    assert store.get_visualizations_by_project(project.id) == [vis]
    assert store.delete_project(project.id)
    assert store.get_visualization(vis.id).project_id is None
    assert not store.delete_project(project.id)

def test_json_persistence(tmp_path):
    path = tmp_path / "data" / "store.json"
    store = _seeded(str(path))
    user = store.create_user(UserCreate(username="ada", password="pw"))
    project = store.create_project(ProjectCreate(user_id=user.id, name="p", language="java", code="x"))
    assert path.exists()

    reloaded = Storage(str(path))
    assert reloaded.get_project(project.id) == project
    assert verify_password("pw", reloaded.get_user(user.id).password_hash)
    assert len(reloaded.algorithms) == len(store.algorithms)
