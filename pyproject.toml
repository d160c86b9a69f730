[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "convnet"
version = "0.1.0"
description = "Small feed-forward and convolutional neural networks with back-propagation training and a digit OCR command"
requires-python = ">=3.10"
keywords = ["neural network", "perceptron", "convolution", "backpropagation", "ocr"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]
dependencies = [
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
ocr = "convnet.ocr:main"

[tool.hatch.build.targets.wheel]
packages = ["convnet"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
