# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

import asyncio
from typing import Optional

from aiokafka.errors import KafkaError
from uvicorn import Config, Server

from warehouse_adapter.bus.consumer import KafkaEventConsumer
from warehouse_adapter.common.logging import configure_logger, get_logger
from warehouse_adapter.config import load_settings
from warehouse_adapter.server.api import create_app
from warehouse_adapter.server.services import AdapterServices, build_services

logger = get_logger("server")


async def run_http_server(app, port: int):
    """Run the HTTP/REST server."""
    try:
        config = Config(app=app, host="0.0.0.0", port=port, loop="asyncio")
        userver = Server(config)
        await userver.serve()
    except Exception as e:
        logger.error(f"HTTP server encountered an error: {e}")


async def start_kafka(services: AdapterServices, consumer: Optional[KafkaEventConsumer] = None) -> bool:
    """Connect producer and consumer; the API keeps running if Kafka is unreachable."""
    publisher = services.publisher
    consumer = consumer or KafkaEventConsumer(services.settings.kafka, services.router)
    try:
        await publisher.start()
        await consumer.start()
    except KafkaError as e:
        logger.error(f"Failed to initialize Kafka, continuing without it: {e}")
        await consumer.stop()
        await publisher.stop()
        return False
    services.consumer = consumer
    return True


async def run_consumer(services: AdapterServices):
    try:
        await services.consumer.run()
    except KafkaError as e:
        logger.error(f"Kafka consumer encountered an error: {e}")


async def shutdown(services: AdapterServices):
    if services.consumer is not None:
        await services.consumer.stop()
    await services.publisher.stop()
    await services.order_client.aclose()


async def main():
    """
    Main entry point: HTTP API, Kafka consumer and history cleanup run concurrently.
    """
    settings = load_settings()
    configure_logger(debug=settings.debug, file_path=settings.log_file)

    services = build_services(settings)
    app = create_app(services)

    tasks = [asyncio.create_task(run_http_server(app, settings.port))]

    if settings.kafka.enabled and await start_kafka(services):
        tasks.append(asyncio.create_task(run_consumer(services)))
    elif not settings.kafka.enabled:
        logger.warning("ENABLE_KAFKA is false. Running the HTTP API only.")

    tasks.append(asyncio.create_task(
        services.history.periodic_cleanup(
            settings.history_retention_hours, settings.history_cleanup_interval_hours
        )
    ))

    logger.info(f"Warehouse adapter service listening on port {settings.port}")
    try:
        # the HTTP server returns on SIGINT/SIGTERM; everything else stops with it
        await tasks[0]
    finally:
        for task in tasks[1:]:
            task.cancel()
        await asyncio.gather(*tasks[1:], return_exceptions=True)
        await shutdown(services)


def run():
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nShutting down gracefully on keyboard interrupt.")


if __name__ == '__main__':
    run()
