from aggregate_feeds.models import FeedSource

FEED_SOURCES = [
    # Times of India - Bengaluru
    FeedSource(
        url="https://timesofindia.indiatimes.com/rssfeeds/-2128833038.cms",
        source_name="Times of India",
    ),
    # Hindustan Times - Bengaluru
    FeedSource(
        url="https://www.hindustantimes.com/feeds/rss/cities/bengaluru-news/rssfeed.xml",
        source_name="Hindustan Times",
    ),
    # The Hindu - Bangalore
    FeedSource(
        url="https://www.thehindu.com/news/cities/bangalore/feeder/default.rss",
        source_name="The Hindu",
    ),
]
