import pytest

from socialhub.crud import create_post, get_all_posts, update_post
from socialhub.schemas.common import next_cursor


@pytest.mark.asyncio
async def test_pages_are_disjoint_and_cover_everything(users):
    created = [await create_post('user_alice', f'post {i}') for i in range(5)]

    seen = []
    cursor = None
    while True:
        page = await get_all_posts('user_bob', 2, cursor)
        seen.extend(p.post_id for p in page)
        cursor = next_cursor(page, 2, 'post_id')
        if cursor is None:
            break

    assert len(seen) == len(set(seen)) == 5
    assert set(seen) == {p.post_id for p in created}


@pytest.mark.asyncio
async def test_feed_is_newest_update_first(users):
    first = await create_post('user_alice', 'first')
    second = await create_post('user_bob', 'second')
    await update_post(first.post_id, {'post_content': 'first, edited'})

    page = await get_all_posts('user_alice', 10)
    assert [p.post_id for p in page] == [first.post_id, second.post_id]
    assert page[0].post_content == 'first, edited'


@pytest.mark.asyncio
async def test_short_last_page_ends_paging(users):
    posts = [await create_post('user_alice', f'post {i}') for i in range(3)]
    page = await get_all_posts('user_alice', 10)
    assert len(page) == 3
    assert next_cursor(page, 10, 'post_id') is None
    assert {p.post_id for p in page} == {p.post_id for p in posts}


@pytest.mark.asyncio
async def test_unknown_cursor_yields_empty_page(users):
    await create_post('user_alice', 'hello')
    assert await get_all_posts('user_alice', 10, 'not-a-post') == []


def test_next_cursor_reads_dicts_and_objects():
    class Row:
        def __init__(self, post_id):
            self.post_id = post_id

    assert next_cursor([{'user_id': 'a'}, {'user_id': 'b'}], 2, 'user_id') == 'b'
    assert next_cursor([Row('x'), Row('y')], 2, 'post_id') == 'y'
    assert next_cursor([], 2, 'post_id') is None
