"""
Anti-forgery token extraction.

The page is parsed with BeautifulSoup and the token is located by
attribute, so attribute order and quoting style do not matter. When a
page holds several forms, the first element with the field name and a
non-empty value wins.
"""
from typing import Optional

from bs4 import BeautifulSoup

DEFAULT_TOKEN_FIELD = 'csrf_token'


def extract_token(html: str, field_name: str = DEFAULT_TOKEN_FIELD) -> Optional[str]:
    """
    Extract the first anti-forgery token from an HTML page.

    Args:
        html: Page body
        field_name: Value of the element's name attribute

    Returns:
        Token value, or None if no element carries one
    """
    if not html:
        return None

    soup = BeautifulSoup(html, 'html.parser')
    for element in soup.find_all(attrs={'name': field_name}):
        value = element.get('value')
        if value:
            return str(value)

    return None
