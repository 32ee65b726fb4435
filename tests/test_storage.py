import pytest

from pantry_chef_core.errors import RepositoryError

from conftest import FakeSupabase


def test_upload_uses_prefix_and_timestamp(storage, fake_supabase):
    url = storage.upload(b"jpeg-bytes", "fridge.jpeg", "image/jpeg")

    assert ("images", "ingredient-photos/1718040000123.jpeg") in fake_supabase.storage.objects
    assert url == "https://fake.supabase.co/storage/v1/object/public/images/ingredient-photos/1718040000123.jpeg"
    _, options = fake_supabase.storage.objects[("images", "ingredient-photos/1718040000123.jpeg")]
    assert options["content-type"] == "image/jpeg"


def test_upload_failure(storage, fake_supabase):
    fake_supabase.storage.fail_uploads = True
    with pytest.raises(RepositoryError):
        storage.upload(b"x", "a.png", "image/png")


def test_list_buckets_and_remove(storage, fake_supabase):
    assert storage.list_buckets() == ["images"]
    path = storage.upload_object(b"x", "a.png", "image/png")
    storage.remove([path])
    assert fake_supabase.storage.objects == {}


def test_bound_to_keeps_layout_with_other_client(storage, fake_supabase):
    user_client = FakeSupabase()
    user_storage = storage.bound_to(user_client)

    url = user_storage.upload(b"png", "pantry.png", "image/png")

    assert ("images", "ingredient-photos/1718040000123.png") in user_client.storage.objects
    assert fake_supabase.storage.objects == {}
    assert url.endswith("/images/ingredient-photos/1718040000123.png")
