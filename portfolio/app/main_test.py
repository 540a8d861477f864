"""Unit tests for main.py FastAPI preview application."""

import unittest
from collections.abc import AsyncGenerator

import fastapi.testclient
import httpx

from portfolio.app import client, main

INDEX = {
    'posts': [
        {
            'id': 'react-tips',
            'title': 'React Tips',
            'slug': 'react-tips',
            'date': '2025-01-10',
            'description': 'Hooks',
            'category': 'Frontend',
            'tags': ['react'],
            'featured': True,
        },
        {
            'id': 'vue-guide',
            'title': 'Vue Guide',
            'slug': 'vue-guide',
            'date': '2025-02-10',
            'description': 'Basics',
            'category': 'Frontend',
            'tags': ['vue'],
        },
        {
            'id': 'draft',
            'title': 'Secret Draft',
            'slug': 'draft',
            'date': '2025-03-10',
            'category': 'Frontend',
            'published': False,
        },
    ],
    'categories': [
        {'name': 'Frontend', 'slug': 'frontend', 'color': '#6366f1', 'description': 'Interfaces'},
    ],
    'tags': [],
    'metadata': {'lastUpdated': '2025-03-10', 'totalPosts': 2},
}

POST_BODIES = {
    '/blog/posts/react-tips.html': '<h1 id="react">React body</h1>',
}


def _handler(request: httpx.Request) -> httpx.Response:
    if request.url.path == client.METADATA_URL:
        return httpx.Response(200, json=INDEX)
    if request.url.path in POST_BODIES:
        return httpx.Response(200, text=POST_BODIES[request.url.path])
    return httpx.Response(404)


def _failing_handler(request: httpx.Request) -> httpx.Response:
    return httpx.Response(503)


def _override_http_client(transport: httpx.MockTransport) -> None:
    async def http_client() -> AsyncGenerator[httpx.AsyncClient, None]:
        async with httpx.AsyncClient(transport=transport, base_url='http://site') as http:
            yield http

    main.app.dependency_overrides[main.get_http_client] = http_client


class TestApp(unittest.TestCase):
    """Tests for the preview routes."""

    def setUp(self) -> None:
        """Set up a test client whose HTTP dependency answers from memory."""
        _override_http_client(httpx.MockTransport(_handler))
        self.client = fastapi.testclient.TestClient(main.app, follow_redirects=False)

    def tearDown(self) -> None:
        main.app.dependency_overrides.clear()

    def test_health_endpoint(self) -> None:
        """Test health check endpoint."""
        response = self.client.get('/health')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {'status': 'healthy'})

    def test_listing(self) -> None:
        """The listing shows published posts newest first, plus the sidebar."""
        response = self.client.get('/pages/blog/index.html')
        self.assertEqual(response.status_code, 200)
        self.assertIn('text/html', response.headers['content-type'])
        text = response.text
        self.assertLess(text.index('Vue Guide'), text.index('React Tips'))
        self.assertNotIn('Secret Draft', text)
        self.assertIn('category.html?category=frontend', text)
        self.assertIn('#react', text)

    def test_listing_search(self) -> None:
        """The q parameter filters the listing."""
        response = self.client.get('/pages/blog/index.html', params={'q': 'réact'})
        self.assertEqual(response.status_code, 200)
        grid = response.text.split('id="posts-grid"')[1].split('</section>')[0]
        self.assertIn('React Tips', grid)
        self.assertNotIn('Vue Guide', grid)

    def test_listing_empty_state(self) -> None:
        """No matches shows the empty state."""
        response = self.client.get('/pages/blog/index.html', params={'tag': 'rust'})
        self.assertEqual(response.status_code, 200)
        self.assertIn('id="empty-state"', response.text)

    def test_category_without_parameter_redirects(self) -> None:
        """No category parameter redirects to the listing without an error."""
        response = self.client.get('/pages/blog/category.html')
        self.assertEqual(response.status_code, 307)
        self.assertEqual(response.headers['location'], '/pages/blog/index.html')

    def test_unknown_category_redirects(self) -> None:
        """An unknown category redirects to the listing."""
        response = self.client.get('/pages/blog/category.html', params={'category': 'nope'})
        self.assertEqual(response.status_code, 307)

    def test_category_page(self) -> None:
        """A known category lists its published posts."""
        response = self.client.get('/pages/blog/category.html', params={'category': 'frontend'})
        self.assertEqual(response.status_code, 200)
        self.assertIn('Interfaces', response.text)
        self.assertIn('Vue Guide', response.text)
        self.assertNotIn('Secret Draft', response.text)

    def test_post_page(self) -> None:
        """A post page embeds the fetched body unescaped."""
        response = self.client.get('/pages/blog/post.html', params={'slug': 'react-tips'})
        self.assertEqual(response.status_code, 200)
        self.assertIn('<h1 id="react">React body</h1>', response.text)
        self.assertIn('January 10, 2025', response.text)

    def test_post_page_placeholder(self) -> None:
        """A post whose body can't be fetched shows a placeholder."""
        response = self.client.get('/pages/blog/post.html', params={'slug': 'vue-guide'})
        self.assertEqual(response.status_code, 200)
        self.assertIn('post-unavailable', response.text)

    def test_post_redirects(self) -> None:
        """Missing, unknown and unpublished posts redirect to the listing."""
        for params in ({}, {'slug': 'nope'}, {'slug': 'draft'}):
            with self.subTest(params=params):
                response = self.client.get('/pages/blog/post.html', params=params)
                self.assertEqual(response.status_code, 307)
                self.assertEqual(response.headers['location'], '/pages/blog/index.html')


class TestAppWithoutIndex(unittest.TestCase):
    """The pages degrade when the index can't be fetched."""

    def setUp(self) -> None:
        _override_http_client(httpx.MockTransport(_failing_handler))
        self.client = fastapi.testclient.TestClient(main.app, follow_redirects=False)

    def tearDown(self) -> None:
        main.app.dependency_overrides.clear()

    def test_listing_empty(self) -> None:
        """Fetch failure renders the empty state, not an error page."""
        response = self.client.get('/pages/blog/index.html')
        self.assertEqual(response.status_code, 200)
        self.assertIn('id="empty-state"', response.text)

    def test_post_redirects(self) -> None:
        """Without an index every post redirects."""
        response = self.client.get('/pages/blog/post.html', params={'slug': 'react-tips'})
        self.assertEqual(response.status_code, 307)


class TestFormatDate(unittest.TestCase):
    """Tests for the datefmt template filter."""

    def test_iso_string(self) -> None:
        self.assertEqual(main.format_date('2025-01-10'), 'January 10, 2025')

    def test_passthrough(self) -> None:
        self.assertEqual(main.format_date('soon'), 'soon')
        self.assertEqual(main.format_date(None), '')


if __name__ == '__main__':
    unittest.main()
