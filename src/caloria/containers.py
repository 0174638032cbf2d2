"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from caloria.adapters.demo_recognition_client import DemoRecognitionClient
from caloria.adapters.fdc_client import HttpxFdcClient
from caloria.adapters.openai_recognition_client import OpenAIRecognitionClient
from caloria.adapters.supabase_entry_repository import SupabaseEntryRepository
from caloria.adapters.supabase_profile_repository import SupabaseProfileRepository
from caloria.config import Settings
from caloria.services.cache import InMemoryCache
from caloria.services.clock import Clock, SystemClock
from caloria.services.food_search import FoodSearchService
from caloria.services.recognition import RecognitionClient, RecognitionService
from caloria.services.store import FoodStoreRegistry


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    clock: Clock
    store_registry: FoodStoreRegistry
    food_search_service: FoodSearchService
    recognition_service: RecognitionService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    clock = SystemClock(resolved_settings.default_timezone)
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    store_registry = FoodStoreRegistry(
        entry_repository=SupabaseEntryRepository(supabase_client),
        profile_repository=SupabaseProfileRepository(supabase_client),
        clock=clock,
    )
    fdc_client = HttpxFdcClient.create(
        api_key=resolved_settings.fdc_api_key,
        base_url=resolved_settings.fdc_base_url,
    )
    food_search_service = FoodSearchService(
        fdc_client=fdc_client,
        cache=InMemoryCache(clock=clock),
    )

    openai_client: OpenAIRecognitionClient | None = None
    recognition_client: RecognitionClient
    if resolved_settings.uses_demo_recognition:
        recognition_client = DemoRecognitionClient(
            delay_seconds=resolved_settings.demo_recognition_delay_seconds
        )
    else:
        openai_client = OpenAIRecognitionClient.create(
            api_key=str(resolved_settings.openai_api_key),
            model=resolved_settings.openai_model,
            reasoning_effort=resolved_settings.openai_reasoning_effort,
        )
        recognition_client = openai_client
    recognition_service = RecognitionService(client=recognition_client, clock=clock)

    async def close_resources() -> None:
        await fdc_client.close()
        if openai_client is not None:
            await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        clock=clock,
        store_registry=store_registry,
        food_search_service=food_search_service,
        recognition_service=recognition_service,
        close_resources=close_resources,
    )
