"""
Image URL normalization for catalog records.

Media managers and TMDb describe artwork in several shapes: absolute URLs,
protocol-relative URLs, TMDb-style root-relative paths, objects carrying one
of several URL fields, or lists of any of these.
"""

import logging
from typing import Any, List, Optional

from .config import DEFAULT_IMAGE_PROTOCOL, IMAGE_CDN_BASE

logger = logging.getLogger('listarr')

# First present field wins
IMAGE_URL_FIELDS = (
    'remoteUrl',
    'url',
    'coverUrl',
    'posterPath',
    'backdropPath',
    'path',
    'imagePath',
)


def _extract_url_field(value: dict) -> Any:
    for key in IMAGE_URL_FIELDS:
        if value.get(key):
            return value[key]
    return None


def _first_element(value: Any) -> Any:
    # Lists contribute their first element only, one level deep
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


def make_image_url(image: Any,
                   protocol: str = DEFAULT_IMAGE_PROTOCOL,
                   cdn_base: str = IMAGE_CDN_BASE) -> Optional[str]:
    """
    Turn a single image reference into an absolute URL.

    Args:
        image: String, dict carrying one of IMAGE_URL_FIELDS, or a list whose
            first element is one of those
        protocol: Scheme prefixed to protocol-relative URLs (e.g. 'https:')
        cdn_base: Base prefixed to root-relative paths

    Returns:
        URL string, or None for empty or unrecognised values
    """
    if image is None:
        return None
    try:
        image = _first_element(image)
        if isinstance(image, dict):
            image = _first_element(_extract_url_field(image))
        if image is None or isinstance(image, (dict, list, tuple, set)):
            return None

        text = str(image).strip()
        if not text:
            return None
        if text.startswith('http://') or text.startswith('https://'):
            return text
        if text.startswith('//'):
            return f"{protocol}{text}"
        if text.startswith('/'):
            return f"{cdn_base.rstrip('/')}{text}"
        return text
    except Exception as e:
        logger.debug(f"Ignoring unusable image reference {image!r}: {e}")
        return None


def make_image_urls(images: Any,
                    protocol: str = DEFAULT_IMAGE_PROTOCOL,
                    cdn_base: str = IMAGE_CDN_BASE) -> List[str]:
    """
    Normalize any image reference shape into an ordered list of URLs.

    Lists are expanded one level only; a nested list contributes its first
    element. Order and duplicates are preserved, empty results are removed.

    Args:
        images: None, string, dict, or a list/tuple of those
        protocol: Scheme prefixed to protocol-relative URLs
        cdn_base: Base prefixed to root-relative paths

    Returns:
        List of URL strings (possibly empty)
    """
    if images is None:
        return []
    if isinstance(images, (list, tuple)):
        candidates = list(images)
    else:
        candidates = [images]

    urls = []
    for candidate in candidates:
        url = make_image_url(candidate, protocol=protocol, cdn_base=cdn_base)
        if url:
            urls.append(url)
    return urls


def collect_record_images(record: dict) -> List[Any]:
    """
    Gather the raw image references of a lookup record.

    Preference: the record's 'images' list, then a nested series' 'images',
    then single poster/backdrop paths, then 'imageUrl' / 'remotePoster'.
    """
    if not isinstance(record, dict):
        return []

    images = record.get('images')
    if isinstance(images, list) and images:
        return images

    nested = record.get('series')
    if isinstance(nested, dict) and isinstance(nested.get('images'), list) and nested['images']:
        return nested['images']

    for key in ('posterPath', 'backdropPath', 'imageUrl', 'remotePoster'):
        if record.get(key):
            return [record[key]]
    return []
