"""
素材目录客户端
API访问、无限滚动分页与列表条目的预览预取
"""

from clipcatalog.client.api import CatalogApiClient, CatalogApiError
from clipcatalog.client.debounce import Debouncer
from clipcatalog.client.paginator import ClientPaginator, PaginatorState, PaginatorStatus
from clipcatalog.client.playback import (
    HeadlessMediaElement,
    MediaElement,
    PlaybackRejected,
    SoundContext,
)
from clipcatalog.client.poster import FrameGrabber, PosterCapture, PosterCaptureError, encode_poster
from clipcatalog.client.prefetcher import PreviewPrefetcher, PreviewState
from clipcatalog.client.viewport import Rect, ViewportObserver

__all__ = [
    'CatalogApiClient',
    'CatalogApiError',
    'Debouncer',
    'ClientPaginator',
    'PaginatorState',
    'PaginatorStatus',
    'HeadlessMediaElement',
    'MediaElement',
    'PlaybackRejected',
    'SoundContext',
    'FrameGrabber',
    'PosterCapture',
    'PosterCaptureError',
    'encode_poster',
    'PreviewPrefetcher',
    'PreviewState',
    'Rect',
    'ViewportObserver',
]
