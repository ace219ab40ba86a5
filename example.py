"""Example: topic router (mediator) and a stock grabber subject with two UI observers."""

import logging

from dispatchcore import Observer, Subject, TopicRouter, load_settings

logging.basicConfig(level=logging.INFO)


def example_subscriber(value) -> None:
    print(value)


class StockGrabber:
    """Fetches stock quotes and notifies observers; the subject stays private."""

    def __init__(self) -> None:
        self._subject = Subject("stock-grabber")

    def add_observer(self, observer: Observer) -> None:
        self._subject.attach(observer)

    def remove_observer(self, observer: Observer) -> bool:
        return self._subject.detach(observer)

    def fetch_stocks(self) -> None:
        stocks = {"aapl": 167.00, "goog": 243.67, "msft": 99.34}
        self._subject.notify(stocks)


class StockUpdaterComponent(Observer):
    def update(self, *args) -> None:
        print('"update" called on StockUpdater with:', args)


class StockChartsComponent(Observer):
    def update(self, *args) -> None:
        print('"update" called on StockCharts with:', args)


def main() -> None:
    settings = load_settings()

    mediator = TopicRouter.from_settings(settings, name="example")
    mediator.subscribe("some event", example_subscriber)
    mediator.publish("some event", "foo bar")

    stock_app = StockGrabber()
    updater = StockUpdaterComponent()
    charts = StockChartsComponent()
    stock_app.add_observer(updater)
    stock_app.fetch_stocks()
    stock_app.add_observer(charts)
    stock_app.fetch_stocks()
    stock_app.remove_observer(updater)
    stock_app.fetch_stocks()
    stock_app.remove_observer(charts)
    stock_app.fetch_stocks()  # no observers left


if __name__ == "__main__":
    main()
