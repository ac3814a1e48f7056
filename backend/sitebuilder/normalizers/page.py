from .block import normalize_block

def normalize_page(page, blocks=None, admin=False):
    data = {
        "id": page.id,
        "title": page.title,
        "slug": page.slug,
        "published": page.published if admin else None,
    }

    if blocks is not None:
        data["blocks"] = [normalize_block(b, admin=admin) for b in blocks]

    return data
