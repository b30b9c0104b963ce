"""
Builders for resolving the Dockerfile a build runs from.
"""
from pathlib import Path
from typing import Optional
from ..MODELS.action_layout import ActionLayout
from ..MODELS.build_config import UNSPECIFIED
from ..MODELS.image_spec import ExistingImage, ImageSpec, SynthesizedImage
from ..errors import ConfigurationError


class ImageResolver:
    """
    Maps an architecture/distribution pair, or a custom base image, to a
    Dockerfile path under the action's Dockerfiles directory.
    """
    def __init__(self, layout: ActionLayout):
        """
        Initializes the ImageResolver.

        :param layout: Locations inside the action checkout.
        """
        self.layout = layout

    def resolve(self, arch: str, distro: str, base_image: Optional[str] = None) -> ImageSpec:
        """
        Resolves the image definition without touching the filesystem.

        A custom base image is synthesized at the path the pair would normally
        map to, so later steps see the same location either way.

        :param arch: Architecture tag.
        :param distro: Distribution tag.
        :param base_image: Optional base image reference.
        :return: The image spec.
        :raises ConfigurationError: If the pair is unspecified and no base image is given.
        """
        if (arch == UNSPECIFIED or distro == UNSPECIFIED) and not base_image:
            raise ConfigurationError(
                "run-on-arch: If arch and distro are not specified, base_image is required.",
                field="base_image",
            )

        path = self.layout.dockerfile(arch, distro)
        if base_image:
            return SynthesizedImage(base_image=base_image, path=path)
        return ExistingImage(path=path)

    def materialize(self, spec: ImageSpec) -> Path:
        """
        Writes a synthesized Dockerfile and checks that the Dockerfile exists.

        :param spec: A resolved image spec.
        :return: Path of the Dockerfile on disk.
        :raises MissingImageDefinitionError: If the Dockerfile is missing.
        """
        if isinstance(spec, SynthesizedImage):
            spec.materialize()
        return spec.ensure_exists()
