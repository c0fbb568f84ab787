"""Bundled storefront images.

Order matters: an asset handle is the file's position in BUNDLED_ASSETS, and
when two files normalize to the same key the earlier one wins.
"""

BUNDLED_ASSETS = [
    "4X4.jpg",
    "adaptive-icon.png",
    "Alloy.jpg",
    "Aluminum Piston.jpg",
    "Aluminum.jpg",
    "Brake Cylinder.jpg",
    "Brake Disc.jpg",
    "Brake Hoses.jpg",
    "Brake Pads.jpg",
    "Bumper.png",
    "Car Engine Clutch.jpg",
    "Car Mats.jpg",
    "Chrome.jpg",
    "Custom.jpg",
    "Cylinder Head Combustion.jpg",
    "Cylinder Head Gasket.jpg",
    "Door Handle.jpg",
    "favicon.png",
    "GPS.jpg",
    "icon.png",
    "images.jpg",
    "Lamps.jpg",
    "Power Steering Pump.jpg",
    "Seat Cover.jpg",
    "Register_Login_background.jpg",
    "splash-icon.png",
    "Steel.jpg",
    "Steering Rack.jpg",
    "Steering Wheel.jpg",
    "Tie Rod for Kia Mustang 2006.jpg",
    "Timing Belt.jpg",
    "Turbocharger.jpg",
    "autoparts-logo.png",
    "Car-Body.jpg",
    "Wheels and Rims.jpg",
    "Engine.jpg",
    "Vehicle Body Parts.jpg",
    "Accessories.jpg",
    "FooterCar.jpg",
    "Lamps2.jpg",
    "Master Card.avif",
    "Visa.avif",
    "American Express.avif",
    "Discover.avif",
    "Diners.avif",
    "China Union Pay.avif",
    "autopartse.avif",
    "Drivery.avif",
    "Drivilux.avif",
    "Motorks.avif",
    "Wheelbu.avif",
]

# Compact keys used by payment and partner badges
COMPACT_ALIASES = {
    "mastercard": "Master Card.avif",
    "visa": "Visa.avif",
    "amex": "American Express.avif",
    "discover": "Discover.avif",
    "diners": "Diners.avif",
    "unionpay": "China Union Pay.avif",
    "autopartse": "autopartse.avif",
    "drivery": "Drivery.avif",
    "drivilux": "Drivilux.avif",
    "motorks": "Motorks.avif",
    "wheelbu": "Wheelbu.avif",
}

IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".gif", ".webp", ".avif", ".svg"})
