# news.py
import logging
import math

from fastapi import APIRouter, Depends, HTTPException, Query, status
from slugify import slugify
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from devhub.database import get_db
from devhub.models.news import News
from devhub.routers.dependencies import admin_only, get_current_user
from devhub.schemas.common import Envelope
from devhub.schemas.news import (
    NewsArticleData,
    NewsArticlesData,
    NewsCreate,
    NewsListData,
    NewsPagination,
    NewsRead,
    NewsSummary,
    NewsUpdate,
)
from devhub.utils.dates import utc_now


router = APIRouter()

logger = logging.getLogger(__name__)

DUPLICATE_SLUG = "Article with this slug already exists"
SLUG_MAX_LENGTH = 250


def _published(db: Session):
    return db.query(News).filter(News.published.is_(True)).order_by(News.published_at.desc(), News.id.desc())


@router.get("", response_model=Envelope[NewsListData])
def read_news(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=50),
    db: Session = Depends(get_db),
) -> Envelope[NewsListData]:
    query = _published(db)
    total = query.count()
    articles = query.offset((page - 1) * limit).limit(limit).all()
    pages = math.ceil(total / limit)
    return Envelope(
        message="News articles retrieved successfully",
        data=NewsListData(
            articles=[NewsSummary.model_validate(a) for a in articles],
            pagination=NewsPagination(
                current_page=page,
                total_pages=pages,
                total_count=total,
                has_next_page=page < pages,
                has_prev_page=page > 1,
            ),
        ),
    )


@router.get("/latest", response_model=Envelope[NewsArticlesData])
def read_latest_news(limit: int = Query(default=3, ge=1, le=50), db: Session = Depends(get_db)) -> Envelope[NewsArticlesData]:
    articles = _published(db).limit(limit).all()
    return Envelope(
        message="Latest news articles retrieved successfully",
        data=NewsArticlesData(articles=[NewsSummary.model_validate(a) for a in articles]),
    )


@router.get("/{slug}", response_model=Envelope[NewsArticleData])
def read_article(slug: str, db: Session = Depends(get_db)) -> Envelope[NewsArticleData]:
    article = db.query(News).filter(News.slug == slug, News.published.is_(True)).first()
    if not article:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Article not found")

    db.query(News).filter(News.id == article.id).update({News.views: News.views + 1}, synchronize_session=False)
    db.commit()
    db.refresh(article)
    return Envelope(message="Article retrieved successfully", data=NewsArticleData(article=NewsRead.model_validate(article)))


@router.get("/{slug}/other", response_model=Envelope[NewsArticlesData])
def read_other_articles(slug: str, limit: int = Query(default=3, ge=1, le=50), db: Session = Depends(get_db)) -> Envelope[NewsArticlesData]:
    articles = _published(db).filter(News.slug != slug).limit(limit).all()
    return Envelope(
        message="Other news articles retrieved successfully",
        data=NewsArticlesData(articles=[NewsSummary.model_validate(a) for a in articles]),
    )


@router.post(
    "",
    response_model=Envelope[NewsArticleData],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(get_current_user), Depends(admin_only)],
)
def create_article(payload: NewsCreate, db: Session = Depends(get_db)) -> Envelope[NewsArticleData]:
    slug = slugify(payload.slug or payload.title, max_length=SLUG_MAX_LENGTH)
    if not slug:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Title must contain letters or numbers")
    if db.query(News.id).filter(News.slug == slug).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=DUPLICATE_SLUG)

    article = News(
        title=payload.title,
        slug=slug,
        preview=payload.preview,
        content=payload.content,
        image_url=payload.image_url,
        author=payload.author,
        published=payload.published,
        published_at=utc_now() if payload.published else None,
    )
    db.add(article)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=DUPLICATE_SLUG)
    db.refresh(article)

    logger.info("news.create article_id=%s slug=%s published=%s", article.id, article.slug, article.published)
    return Envelope(message="News article created successfully", data=NewsArticleData(article=NewsRead.model_validate(article)))


@router.put(
    "/{news_id}",
    response_model=Envelope[NewsArticleData],
    dependencies=[Depends(get_current_user), Depends(admin_only)],
)
def update_article(news_id: int, payload: NewsUpdate, db: Session = Depends(get_db)) -> Envelope[NewsArticleData]:
    article = db.get(News, news_id)
    if not article:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Article not found")

    updates = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None or k == "image_url"}
    for field, value in updates.items():
        setattr(article, field, value)
    if article.published and article.published_at is None:
        article.published_at = utc_now()

    db.commit()
    db.refresh(article)
    return Envelope(message="Article updated successfully", data=NewsArticleData(article=NewsRead.model_validate(article)))


@router.delete(
    "/{news_id}",
    response_model=Envelope[None],
    dependencies=[Depends(get_current_user), Depends(admin_only)],
)
def delete_article(news_id: int, db: Session = Depends(get_db)) -> Envelope[None]:
    article = db.get(News, news_id)
    if not article:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Article not found")
    db.delete(article)
    db.commit()
    return Envelope(message="Article deleted successfully")
