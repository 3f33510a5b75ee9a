"""Dependency Injection Container."""

from injector import Injector, Module, provider, singleton

from .config import Settings, get_settings
from component import ComponentPipeline
from storage import ArtifactStore
from models import ModelLoader, ModelProvider
from agents.generator import ComponentGenerator
from handlers import GenerateHandler, PreviewHandler, DeployHandler


class CoreModule(Module):
    """Core dependencies."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    @singleton
    @provider
    def provide_settings(self) -> Settings:
        return self.settings

    @singleton
    @provider
    def provide_store(self) -> ArtifactStore:
        """Provide the preview artifact store."""
        return ArtifactStore(self.settings.preview_dir)

    @singleton
    @provider
    def provide_pipeline(self) -> ComponentPipeline:
        return ComponentPipeline(light_dom=self.settings.light_dom)

    @singleton
    @provider
    def provide_model_loader(self) -> ModelLoader:
        """Provide model loader with configured API keys."""
        return ModelLoader(
            openai_api_key=self.settings.openai_api_key,
            gemini_api_key=self.settings.gemini_api_key,
            temperature=self.settings.generation_temperature,
        )

    @singleton
    @provider
    def provide_generator(self, loader: ModelLoader, pipeline: ComponentPipeline) -> ComponentGenerator:
        """Provide component generator with all dependencies."""
        return ComponentGenerator(
            model_loader=loader,
            pipeline=pipeline,
            default_models={
                ModelProvider.OPENAI: self.settings.openai_model,
                ModelProvider.GEMINI: self.settings.gemini_model,
            },
            max_history_content=self.settings.max_history_content,
        )

    @singleton
    @provider
    def provide_generate_handler(self, generator: ComponentGenerator, store: ArtifactStore) -> GenerateHandler:
        return GenerateHandler(generator, store)

    @singleton
    @provider
    def provide_preview_handler(self, store: ArtifactStore, pipeline: ComponentPipeline) -> PreviewHandler:
        return PreviewHandler(store, pipeline)

    @singleton
    @provider
    def provide_deploy_handler(self, store: ArtifactStore) -> DeployHandler:
        return DeployHandler(store, self.settings)


def create_container(settings: Settings | None = None) -> Injector:
    """Create configured injector."""
    return Injector([CoreModule(settings or get_settings())])
