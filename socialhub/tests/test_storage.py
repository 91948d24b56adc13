import io

from PIL import Image

from socialhub import storage


def test_unique_filename_keeps_extension():
    first = storage.generate_unique_filename('holiday.PNG')
    second = storage.generate_unique_filename('holiday.PNG')
    assert first.endswith('.PNG')
    assert first != second


def test_image_url_uses_bucket_and_region(monkeypatch):
    monkeypatch.setattr(storage, 'S3_PUBLIC_BASE_URL', None)
    monkeypatch.setattr(storage, 'S3_REGION', 'eu-west-1')
    assert storage.get_image_url('posts', 'u1/images/a.jpg') == 'https://posts.s3.eu-west-1.amazonaws.com/u1/images/a.jpg'


def test_image_url_prefers_public_base(monkeypatch):
    monkeypatch.setattr(storage, 'S3_PUBLIC_BASE_URL', 'http://localhost:9000/')
    assert storage.get_image_url('avatars', 'u1/a.jpg') == 'http://localhost:9000/avatars/u1/a.jpg'


def test_thumbnail_is_bounded_jpeg():
    source = io.BytesIO()
    Image.new('RGBA', (1280, 640), (10, 20, 30, 255)).save(source, format='PNG')

    thumbnail, aspect_ratio = storage.make_thumbnail(source.getvalue())

    assert aspect_ratio == '1280/640'
    with Image.open(io.BytesIO(thumbnail)) as img:
        assert img.format == 'JPEG'
        assert img.size == (320, 160)
