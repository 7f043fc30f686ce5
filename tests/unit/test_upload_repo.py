from pvinspect.dal.upload_repo import UploadRepository

def _save(repo, image_id, session_id="s1"):
    return repo.save(image_id, session_id, f"{image_id}.png", "image/png", b"data", {"size": 4})

def test_reads_do_not_create_sessions():
    repo = UploadRepository()
    for i in range(10):
        assert repo.get("missing", f"session-{i}") is None
        assert repo.list_images(f"other-{i}") == []
        assert repo.get_analysis_history("missing", f"history-{i}") is None
        assert repo.delete("missing", f"delete-{i}") is False
    assert repo._storage == {}

def test_list_images_newest_first_within_the_same_second():
    repo = UploadRepository()
    for image_id in ("a", "b", "c"):
        _save(repo, image_id)
    assert [r["id"] for r in repo.list_images("s1")] == ["c", "b", "a"]

def test_sessions_are_isolated():
    repo = UploadRepository()
    _save(repo, "a", "s1")
    assert repo.get("a", "s2") is None
    assert repo.delete("a", "s2") is False
    assert repo.get("a", "s1") is not None

def test_analysis_history():
    repo = UploadRepository()
    _save(repo, "a")
    assert repo.get_analysis_history("a", "s1") == []
    assert repo.save_analysis("a", "s1", {"id": "first"})
    assert repo.save_analysis("a", "s1", {"id": "second"})
    assert [h["id"] for h in repo.get_analysis_history("a", "s1")] == ["second", "first"]
    assert repo.save_analysis("missing", "s1", {"id": "x"}) is False

def test_clear_session():
    repo = UploadRepository()
    _save(repo, "a")
    repo.clear_session("s1")
    assert repo.list_images("s1") == []
    repo.clear_session("never-existed")
