"""本地资源引用协议 asset://<assetId>."""

from bs4 import BeautifulSoup

ASSET_URL_PREFIX = "asset://"


def build_asset_url(asset_id: str) -> str:
    """生成本地资源引用."""
    return f"{ASSET_URL_PREFIX}{asset_id}"


def get_asset_id_from_url(asset_url: str) -> str | None:
    """从本地资源引用中取出资源 ID，不是本地引用时返回 None."""
    if not asset_url.startswith(ASSET_URL_PREFIX):
        return None
    return asset_url[len(ASSET_URL_PREFIX) :] or None


def render_asset_urls(html: str, base_path: str) -> str:
    """
    把正文中的 asset:// 引用替换为可访问的地址.

    Args:
        html: 正文 HTML
        base_path: 资源地址前缀，例如 /api/assets/
    """
    if ASSET_URL_PREFIX not in html:
        return html

    soup = BeautifulSoup(html, "lxml")
    for image in soup.find_all("img"):
        src = image.get("src")
        asset_id = get_asset_id_from_url(src) if isinstance(src, str) else None
        if asset_id:
            image["src"] = f"{base_path}{asset_id}"

    container = soup.body or soup
    return container.decode_contents()
