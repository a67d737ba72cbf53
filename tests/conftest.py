"""Pytest configuration and fixtures."""

from collections.abc import Callable

import httpx
import pytest

FMT_PAGE = """
<!DOCTYPE html>
<html>
<head><title>fmt package - fmt - Go Packages</title></head>
<body>
<main class="go-Main-content">
  <div class="Documentation">
    <section class="Documentation-overview">
      <p class="Documentation-synopsis">Package fmt implements formatted I/O.</p>
      <div class="Documentation-description">
        <p>Package fmt implements formatted I/O with functions analogous
        to C's printf and scanf.</p>
      </div>
    </section>
    <nav class="Documentation-index">
      <ul>
        <li><a href="#pkg-overview">package fmt</a></li>
        <li><a href="#Printf">func Printf(format string, a ...interface{}) (n int, err error)</a></li>
        <li><a href="#Println">func Println(a ...any) (n int, err error)</a></li>
        <li><a href="#Stringer">type Stringer</a></li>
        <li><a href="#pkg-all">Show all...</a></li>
      </ul>
    </nav>
    <div class="Documentation-function">
      <h4 class="Documentation-functionHeader">func Printf(format string, a ...interface{}) (n int, err error)</h4>
      <div class="Documentation-functionBody">
        <p>Printf formats according to a format specifier and writes to standard output.</p>
      </div>
    </div>
    <div class="Documentation-function">
      <h4 class="Documentation-functionHeader">func Println(a ...any) (n int, err error)</h4>
      <div class="Documentation-functionBody">
        <p>Println formats using the default formats for its operands.</p>
      </div>
    </div>
    <div class="Documentation-type">
      <h4 class="Documentation-typeHeader">type Stringer</h4>
      <pre>type Stringer interface {
	String() string
}</pre>
      <p>Stringer is implemented by any value that has a String method.</p>
    </div>
  </div>
</main>
</body>
</html>
"""

NOT_FOUND_PAGE = """
<html>
<head><title>Not Found - Go Packages</title></head>
<body><div class="NotFound">Oops! We couldn't find "nosuch".</div></body>
</html>
"""


def page(body: str, title: str = "") -> str:
    """Wrap a body fragment into a minimal HTML document"""
    head = f"<title>{title}</title>" if title else ""
    return f"<html><head>{head}</head><body>{body}</body></html>"


@pytest.fixture
def fmt_page() -> str:
    return FMT_PAGE


@pytest.fixture
def not_found_page() -> str:
    return NOT_FOUND_PAGE


@pytest.fixture
def mock_http_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.AsyncClient]:
    """Factory for AsyncClients answering through a request handler"""

    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler), follow_redirects=True)

    return factory
