"""CLI entry point for browsing listings and validating uploads."""

import asyncio
from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="property-finder", help="Property listing search + AI location validation"
)
console = Console()


class ListingTypeOption(str, Enum):
    """Listing type filter options."""
    sale = "sale"
    rent = "rent"
    any = "any"


class PropertyTypeOption(str, Enum):
    """Type of a new listing."""
    sale = "sale"
    rent = "rent"


class AccessibilityOption(str, Enum):
    """Accessibility filter options."""
    vehicle = "vehicle"
    narrow_way = "narrow_way"
    any = "any"


def parse_coordinates(value: str) -> tuple[float, float]:
    """Parse "LAT,LNG" into floats."""
    try:
        lat_str, lng_str = value.split(",")
        return float(lat_str), float(lng_str)
    except ValueError:
        raise typer.BadParameter(f"Expected LAT,LNG but got: {value}")


@app.command()
def search(
    term: str = typer.Argument("", help="Search title, address or listing type"),
    min_price: str = typer.Option("", "--min-price", help="Minimum price"),
    max_price: str = typer.Option("", "--max-price", help="Maximum price"),
    listing_type: ListingTypeOption = typer.Option(
        ListingTypeOption.any, "--type", "-t", help="sale, rent or any"
    ),
    bedrooms: str = typer.Option("", "--bedrooms", "-b", help="Minimum bedrooms"),
    bathrooms: str = typer.Option("", "--bathrooms", help="Minimum bathrooms"),
    garage: bool = typer.Option(False, "--garage", help="Must have a garage"),
    negotiable: bool = typer.Option(False, "--negotiable", help="Price must be negotiable"),
    water: bool = typer.Option(False, "--water", help="Must have water"),
    electricity: bool = typer.Option(False, "--electricity", help="Must have electricity"),
    accessibility: AccessibilityOption = typer.Option(
        AccessibilityOption.any, "--access", help="vehicle, narrow_way or any"
    ),
    features: list[str] = typer.Option(
        None, "--feature", "-f", help="Required feature (repeatable, e.g. -f Garden -f 'Pet Friendly')"
    ),
    location: str = typer.Option("", "--location", "-l", help="Address must contain this text"),
    near: Optional[str] = typer.Option(
        None, "--near", help="Your location as LAT,LNG (sorts by distance)"
    ),
    locate: bool = typer.Option(
        False, "--locate", help="Look up your location from your IP address"
    ),
    html: bool = typer.Option(False, "--html", help="Also write an HTML report with a map"),
    output_dir: Path = typer.Option(
        None, "--output-dir", "-o", help="Output directory for the HTML report"
    ),
):
    """
    Search and filter listings, sorted by distance when your location is known.

    Examples:
        property-finder search villa
        property-finder search --type rent --max-price 3000 -f Furnished
        property-finder search --near 34.05,-118.24 --html
    """
    from pydantic import ValidationError

    from property_finder.config.settings import load_settings
    from property_finder.data.placeholder import PLACEHOLDER_LISTINGS
    from property_finder.export.html_report import export_to_html
    from property_finder.models.listing import FilterSpec, ViewerLocation
    from property_finder.pipeline import compute_display_list
    from property_finder.utils.geo import ip_location_source, resolve_viewer_location

    try:
        filters = FilterSpec(
            min_price=min_price,
            max_price=max_price,
            listing_type=listing_type.value,
            bedrooms=bedrooms,
            bathrooms=bathrooms,
            garage=garage,
            negotiable=negotiable,
            water=water,
            electricity=electricity,
            accessibility=accessibility.value,
            selected_features=features or [],
            location=location,
        )
    except ValidationError as e:
        console.print(f"[red]Invalid filters: {e}[/]")
        raise typer.Exit(2)

    settings = load_settings(output_dir=output_dir)

    if near:
        lat, lng = parse_coordinates(near)
        try:
            viewer = ViewerLocation.resolved(lat, lng)
        except ValidationError:
            raise typer.BadParameter(f"Coordinates out of range: {near}")
    else:
        source = ip_location_source(settings.viewer_location_url) if locate else None
        viewer = asyncio.run(resolve_viewer_location(source))

    display = compute_display_list(PLACEHOLDER_LISTINGS, filters, term, viewer)

    color = "green" if display.sorted_by_distance else "yellow"
    console.print(f"[{color}]{display.status_message}[/]")

    if not display.entries:
        console.print("[yellow]No properties match your current search or filters.[/]")
    else:
        table = Table(title=f"{len(display)} of {display.total} listings", show_header=True)
        table.add_column("Title", style="cyan")
        table.add_column("Type")
        table.add_column("Price", justify="right", style="green")
        table.add_column("Beds", justify="right")
        table.add_column("Baths", justify="right")
        table.add_column("Address")
        table.add_column("Distance", justify="right")
        for entry in display:
            l = entry.listing
            dist = f"{entry.distance_km:,.1f} km" if entry.has_distance else "-"
            table.add_row(
                l.title, l.type, f"{l.price:,.0f}", str(l.bedrooms), str(l.bathrooms), l.address, dist
            )
        console.print(table)

    if html:
        path = export_to_html(display, settings.output_dir, search_term=term)
        console.print(f"  HTML: {path}")


@app.command()
def validate(
    photo: Path = typer.Argument(..., exists=True, dir_okay=False, help="Photo of the property"),
    latitude: float = typer.Option(..., "--lat", min=-90, max=90),
    longitude: float = typer.Option(..., "--lng", min=-180, max=180),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="Ollama model name"),
):
    """
    Check that a photo plausibly matches the address at the given coordinates.

    Examples:
        property-finder validate house.jpg --lat 34.05 --lng -118.24
    """
    from property_finder.config.settings import load_settings
    from property_finder.llm.client import create_model_handle
    from property_finder.llm.validator import LocationValidator
    from property_finder.upload import encode_photo
    from property_finder.utils.geo import ReverseGeocoder

    settings = load_settings(ollama_model=model)
    validator = LocationValidator(create_model_handle(settings), ReverseGeocoder(
        settings.geocoder_user_agent, settings.geocoder_timeout
    ))

    try:
        photo_data_uri = encode_photo(photo)
    except ValueError as e:
        console.print(f"[red]{e}[/]")
        raise typer.Exit(2)

    with console.status("Validating location..."):
        result = asyncio.run(validator.validate(latitude, longitude, photo_data_uri))

    if result.is_valid_location:
        console.print(f"[bold green]Location validated:[/] {result.formatted_address}")
    else:
        console.print(f"[bold red]Location validation issue:[/] {result.formatted_address}")
        raise typer.Exit(1)


@app.command()
def upload(
    photo: Path = typer.Option(..., "--photo", "-p", exists=True, dir_okay=False),
    title: str = typer.Option(..., "--title"),
    description: str = typer.Option(..., "--description"),
    price: float = typer.Option(..., "--price"),
    listing_type: PropertyTypeOption = typer.Option(..., "--type", "-t"),
    address: str = typer.Option(..., "--address"),
    latitude: float = typer.Option(..., "--lat"),
    longitude: float = typer.Option(..., "--lng"),
    bedrooms: int = typer.Option(0, "--bedrooms"),
    bathrooms: int = typer.Option(0, "--bathrooms"),
    area: float = typer.Option(0, "--area"),
    features: list[str] = typer.Option(None, "--feature", "-f"),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="Ollama model name"),
):
    """
    List a new property. Submission only goes through once the location is validated.

    Examples:
        property-finder upload -p house.jpg --title "Sunny Cottage" ... --lat 34.05 --lng -118.24
    """
    from pydantic import ValidationError

    from property_finder.config.settings import load_settings
    from property_finder.llm.client import create_model_handle
    from property_finder.llm.validator import LocationValidator
    from property_finder.upload import PropertyUpload, PropertyUploadForm, SubmissionBlockedError
    from property_finder.utils.geo import ReverseGeocoder

    try:
        values = PropertyUpload(
            title=title,
            description=description,
            price=price,
            type=listing_type.value,
            address=address,
            latitude=latitude,
            longitude=longitude,
            bedrooms=bedrooms,
            bathrooms=bathrooms,
            area=area,
            features=features or [],
        )
    except ValidationError as e:
        console.print(f"[red]Invalid property details:[/]\n{e}")
        raise typer.Exit(2)

    settings = load_settings(ollama_model=model)
    validator = LocationValidator(create_model_handle(settings), ReverseGeocoder(
        settings.geocoder_user_agent, settings.geocoder_timeout
    ))

    form = PropertyUploadForm(validator)
    try:
        form.set_photo_file(photo)
    except ValueError as e:
        console.print(f"[red]{e}[/]")
        raise typer.Exit(2)
    form.set_coordinates(values.latitude, values.longitude)

    with console.status("Validating location..."):
        result = asyncio.run(form.validate_location())
    color = "green" if result.is_valid_location else "red"
    console.print(f"[{color}]{result.formatted_address}[/]")

    try:
        listing = form.submit(values)
    except SubmissionBlockedError as e:
        console.print(f"[bold red]Not submitted:[/] {e}")
        raise typer.Exit(1)

    console.print(f"[bold green]{listing.title} has been successfully listed (id {listing.id}).[/]")


@app.command("features")
def list_features():
    """Show the amenity tags usable with --feature."""
    from property_finder.config.settings import ALL_FEATURES

    for feature in ALL_FEATURES:
        console.print(f"  {feature}")


if __name__ == "__main__":
    app()
