"""FastAPI preview server for the built site.

Serves the output directory as static files and renders the blog listing,
category and post pages from the published metadata index, fetched over HTTP
the same way a browser fetches it.
"""

import datetime
import pathlib
from collections.abc import AsyncGenerator
from typing import Annotated

import fastapi
import fastapi.responses
import fastapi.staticfiles
import httpx

import common.app
import common.settings

from . import client, loaders, search

APP_DIR = pathlib.Path(__file__).resolve().parent

app = common.app.create_app('Portfolio Preview')

templates = common.app.make_templates(APP_DIR / 'templates')


def format_date(value: str | datetime.date | None, fmt: str = '%B %d, %Y') -> str:
    """Format an ISO date string for display; unparseable values pass through."""
    if value is None:
        return ''
    if isinstance(value, str):
        try:
            value = datetime.date.fromisoformat(value)
        except ValueError:
            return value
    return value.strftime(fmt)


templates.env.filters['datefmt'] = format_date  # type: ignore[assignment]


async def get_http_client() -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTP client pointed at the published site."""
    if common.settings.PREVIEW_BASE_URL:
        http = httpx.AsyncClient(base_url=common.settings.PREVIEW_BASE_URL, timeout=10.0)
    else:
        http = httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app), base_url='http://preview'
        )
    async with http:
        yield http


HttpClient = Annotated[httpx.AsyncClient, fastapi.Depends(get_http_client)]


@app.get('/pages/blog/index.html', response_class=fastapi.responses.HTMLResponse)
async def blog_index(
    request: fastapi.Request,
    http: HttpClient,
    q: str = '',
    category: str | None = None,
    tag: str | None = None,
) -> fastapi.responses.HTMLResponse:
    """Render the post listing with search filters and the sidebar."""
    loader = await loaders.BlogLoader.load(client.MetadataClient(http))
    blog_search = search.BlogSearch(loader.published_posts())
    blog_search.filters = search.SearchFilters(query=q, category=category or None, tag=tag or None)
    posts = blog_search.apply()
    return templates.TemplateResponse(
        request=request,
        name='index.html.jinja2',
        context={
            'posts': posts,
            'filters': blog_search.active_filters(),
            'categories': loader.category_counts(),
            'tags': loader.top_tags(),
            'featured': loader.featured_posts(),
        },
    )


@app.get('/pages/blog/category.html', response_model=None)
async def blog_category(
    request: fastapi.Request,
    http: HttpClient,
    category: str | None = None,
) -> fastapi.responses.Response:
    """Render the posts of one category, or redirect to the listing."""
    result = await loaders.CategoryLoader(client.MetadataClient(http)).load(category)
    if isinstance(result, loaders.Redirect):
        return fastapi.responses.RedirectResponse(result.url)
    return templates.TemplateResponse(
        request=request,
        name='category.html.jinja2',
        context={'category': result.category, 'posts': result.posts},
    )


@app.get('/pages/blog/post.html', response_model=None)
async def blog_post(
    request: fastapi.Request,
    http: HttpClient,
    slug: str | None = None,
) -> fastapi.responses.Response:
    """Render a single post, with a placeholder if its body can't be fetched."""
    post_loader = loaders.PostLoader(client.MetadataClient(http), client.ContentResolver(http))
    result = await post_loader.load(slug)
    if isinstance(result, loaders.Redirect):
        return fastapi.responses.RedirectResponse(result.url)
    return templates.TemplateResponse(
        request=request,
        name='post.html.jinja2',
        context={
            'post': result.post,
            'content': result.content,
            'found': isinstance(result.content, client.ContentFound),
        },
    )


# Registered last so the routes above take precedence over files in the output.
app.mount(
    '/',
    fastapi.staticfiles.StaticFiles(
        directory=common.settings.SITE_OUTPUT, html=True, check_dir=False
    ),
    name='site',
)
