import setuptools

with open('README.md', 'r') as fh:
    long_description = fh.read()

setuptools.setup(
    name='pidconvert',
    version='0.82.0',
    description='Convert Gruntz .PID graphics to BMP, TGA and PNG.',
    long_description=long_description,
    long_description_content_type='text/markdown',
    packages=setuptools.find_namespace_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        'deal',
        'numpy',
        'Pillow',
        'PyYAML',
        'typer',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': ['pidconvert=pidconvert.runner:app'],
    },
    classifiers=[
        'Development Status :: 4 - Beta',
        'Programming Language :: Python :: 3',
        'Environment :: Console',
        'License :: OSI Approved :: MIT License',
        'Intended Audience :: Developers',
        'Operating System :: OS Independent',
        'Topic :: Multimedia :: Graphics :: Graphics Conversion',
        'Topic :: Games/Entertainment',
        'Topic :: Utilities'
    ],
    python_requires='>=3.8',
    keywords='game resource image convert pid gruntz rle bmp tga png palette'
)
