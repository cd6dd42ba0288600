from sqlmodel import Session, select
from blog.db.session import get_engine, create_db_and_tables
from blog.models.article import Article, ArticleCreate, Category
from blog.services.article import ArticleService

def seed_articles():
    print("Creating database and tables...")
    create_db_and_tables()

    with Session(get_engine()) as session:
        # Check if articles already exist to avoid duplicates
        existing_articles = session.exec(select(Article)).all()
        if existing_articles:
            print(f"Database already contains {len(existing_articles)} articles. Skipping seed.")
            return

        print("Seeding initial articles...")
        articles = [
            ArticleCreate(
                title="Hello, world",
                subtitle="Why I started writing again",
                excerpt="A short note on what this blog is going to be about.",
                content="Every few years I promise myself I will write more. This time the plan is simple: "
                        "one post a month, no matter how small.",
                category=Category.PERSONAL,
                tags=["meta", "writing"],
                published=True,
            ),
            ArticleCreate(
                title="Notes on React server components",
                subtitle="What changed after a month in production",
                content="Server components move data fetching back to the server. " * 60,
                category=Category.TECHNOLOGY,
                tags=["react", "frontend"],
                published=True,
            ),
            ArticleCreate(
                title="Two weeks in Kyoto",
                content="Temples, trains and far too much matcha. " * 40,
                category=Category.TRAVEL,
                tags=["japan", "travel"],
            ),
        ]

        service = ArticleService(session)
        for article in articles:
            service.create_article(article)

        print(f"Successfully seeded {len(articles)} articles!")

if __name__ == "__main__":
    seed_articles()
